from django.conf import settings

from survey.catalogue import CatalogueError, load_catalogue
from survey.context import LANGUAGES, SurveyContext


class SurveyContextMiddleware:
    """
    Attach a SurveyContext to every request as `request.survey_context`.

    The language comes from `?lang=` (remembered in the session), then the
    session, then SURVEY_DEFAULT_LANGUAGE.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.default_language = getattr(settings, "SURVEY_DEFAULT_LANGUAGE", "ru")

    def __call__(self, request):
        language = self._language(request)

        try:
            catalogue = load_catalogue()
        except CatalogueError as e:
            print(f"[error] question catalogue: {e}")
            catalogue = None

        request.survey_context = SurveyContext(language=language, catalogue=catalogue)
        return self.get_response(request)

    def _language(self, request):
        requested = request.GET.get("lang")
        if requested in LANGUAGES:
            request.session["language"] = requested
            return requested

        stored = request.session.get("language")
        if stored in LANGUAGES:
            return stored

        return self.default_language if self.default_language in LANGUAGES else "ru"
