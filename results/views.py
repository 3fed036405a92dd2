import traceback

from django.http import JsonResponse
from django.shortcuts import render
from django.views.decorators.http import require_http_methods

from survey.storage import AggregationDataError
from .services import aggregate, build_dashboard, load_results


def _results_for(context):
    """Load and aggregate the stored responses. Returns (results, is_mock)."""
    responses, is_mock = load_results(catalogue=context.catalogue)
    return aggregate(responses, context.catalogue.questions), is_mock


@require_http_methods(["GET"])
def dashboard_view(request):
    """Results dashboard."""
    context = request.survey_context
    page = {'ctx': context, 'strings': context.strings()}

    if context.catalogue is None:
        return render(request, 'results/dashboard.html', {**page, 'error': context.t('results_error')}, status=503)

    try:
        results, is_mock = _results_for(context)
    except AggregationDataError as e:
        print(f"[error] results dashboard: {e}")
        return render(request, 'results/dashboard.html', {**page, 'error': context.t('results_error')}, status=503)
    except Exception as e:
        print(f"[error] results dashboard: {e}")
        traceback.print_exc()
        return render(request, 'results/dashboard.html', {**page, 'error': context.t('results_error')}, status=500)

    return render(request, 'results/dashboard.html', {
        **page,
        'total_count': results.total_count,
        'rows': build_dashboard(results, context),
        'feedback_list': results.feedback_list,
        'is_mock': is_mock,
    })


@require_http_methods(["GET"])
def results_api(request):
    """Aggregated results as JSON."""
    context = request.survey_context
    if context.catalogue is None:
        return JsonResponse({'error': 'Question catalogue unavailable'}, status=503)

    try:
        results, is_mock = _results_for(context)
    except AggregationDataError as e:
        return JsonResponse({'error': str(e)}, status=503)

    return JsonResponse({**results.as_dict(), 'mock': is_mock}, json_dumps_params={'ensure_ascii': False})
