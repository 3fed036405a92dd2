import json
import traceback
import uuid

from django.conf import settings
from django.db import DatabaseError
from django.http import JsonResponse
from django.shortcuts import render
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .storage import AggregationDataError, DatabaseStorage, get_storage
from .transport import TransportError
from .validation import ValidationError, validate


def _validate(raw, catalogue):
    return validate(
        raw,
        catalogue=catalogue,
        enforce_required=settings.SURVEY_ENFORCE_REQUIRED,
        max_feedback_length=settings.SURVEY_MAX_FEEDBACK_LENGTH,
    )


def _render_survey(request, selected=None, status=200, submission_id=None, **extra):
    context = request.survey_context
    selected = selected or {}
    return render(request, 'survey/survey.html', {
        'ctx': context,
        'strings': context.strings(),
        'catalogue': context.catalogue,
        'questions': [
            {
                'id': q.id,
                'key': q.key,
                'text': q.text(context.language),
                'required': q.required,
                'selected': selected.get(q.key, ''),
            }
            for q in context.catalogue.questions
        ] if context.catalogue else [],
        'max_feedback_length': settings.SURVEY_MAX_FEEDBACK_LENGTH,
        'submission_id': submission_id or uuid.uuid4().hex,
        **extra,
    }, status=status)


@require_http_methods(["GET", "POST"])
def survey_view(request):
    """Survey form. POST collects the answers and stores them."""
    context = request.survey_context
    if context.catalogue is None:
        return render(request, 'survey/survey.html', {
            'ctx': context,
            'strings': context.strings(),
            'load_error': context.t('load_error'),
        }, status=503)

    if request.method == "GET":
        return _render_survey(request)

    raw = {
        'answers': {},
        'feedback': request.POST.get('feedback', '').strip(),
    }
    for question in context.catalogue.questions:
        value = request.POST.get(question.key)
        if value in ('yes', 'no'):
            raw['answers'][question.key] = value
    submission_id = request.POST.get('submission_id')
    if submission_id:
        raw['submission_id'] = submission_id

    try:
        record = _validate(raw, context.catalogue)
        get_storage().append(record)
    except (ValidationError, TransportError, DatabaseError) as e:
        print(f"[error] survey submission failed: {e}")
        return _render_survey(request, selected=raw['answers'], status=400,
                              submission_id=raw.get('submission_id'),
                              error=context.t('submit_error'), feedback=raw['feedback'])
    except Exception as e:
        print(f"[error] survey submission failed: {e}")
        traceback.print_exc()
        return _render_survey(request, selected=raw['answers'], status=500,
                              submission_id=raw.get('submission_id'),
                              error=context.t('submit_error'), feedback=raw['feedback'])

    return render(request, 'survey/survey.html', {
        'ctx': context,
        'strings': context.strings(),
        'submitted': True,
    })


@require_http_methods(["GET"])
def questions_api(request):
    context = request.survey_context
    if context.catalogue is None:
        return JsonResponse({'error': 'Question catalogue unavailable'}, status=503)
    return JsonResponse(context.catalogue.as_dict(), json_dumps_params={'ensure_ascii': False})


FORM_CONTENT_TYPES = ('multipart/form-data', 'application/x-www-form-urlencoded')


def _read_payload(request):
    if request.content_type in FORM_CONTENT_TYPES:
        if 'data' not in request.POST:
            raise ValidationError("invalid format")
        return json.loads(request.POST['data'])
    return json.loads(request.body.decode('utf-8'))


@csrf_exempt
@require_http_methods(["GET", "POST"])
def collector_api(request):
    """
    Storage endpoint for survey clients.

    POST: a response as multipart field `data` or as a raw JSON body.
    GET ?action=getResults: every stored response in arrival order.
    """
    storage = DatabaseStorage()

    if request.method == "GET":
        if request.GET.get('action') != 'getResults':
            return JsonResponse({'error': 'Invalid action'}, status=400)
        try:
            responses = storage.read_all()
        except AggregationDataError as e:
            print(f"[error] getResults: {e}")
            return JsonResponse({'error': str(e)}, status=500)
        return JsonResponse({'responses': responses, 'totalCount': len(responses)},
                            json_dumps_params={'ensure_ascii': False})

    catalogue = request.survey_context.catalogue
    if catalogue is None:
        return JsonResponse({'success': False, 'error': 'Question catalogue unavailable'}, status=503)

    try:
        raw = _read_payload(request)
        record = _validate(raw, catalogue)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JsonResponse({'success': False, 'error': 'Invalid JSON'}, status=400)
    except ValidationError as e:
        return JsonResponse({'success': False, 'error': str(e)}, status=400)

    try:
        created = storage.append(record)
    except Exception as e:
        print(f"[error] saving survey response: {e}")
        traceback.print_exc()
        return JsonResponse({'success': False, 'error': str(e)}, status=500)

    if not created:
        return JsonResponse({'success': True, 'message': 'Duplicate submission ignored'})
    return JsonResponse({'success': True, 'message': 'Data saved successfully'})
