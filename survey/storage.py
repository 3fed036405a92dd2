"""
Response storage.

Two backends share one interface (append / read_all):

- "database": the SurveyResponse table of this project.
- "remote": an external storage service (for example a spreadsheet web app)
  that accepts POSTed responses and answers GET ?action=getResults.

Switch with the SURVEY_STORAGE_BACKEND setting.
"""

import time

import requests
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError, IntegrityError, transaction

from .models import SurveyResponse
from .transport import submit
from .validation import parse_timestamp


class AggregationDataError(Exception):
    """The stored result set is missing or malformed."""


class DatabaseStorage:
    def append(self, record):
        """Store a validated record. Returns False if its submission_id was already stored."""
        submission_id = record.get('submission_id')
        if submission_id and SurveyResponse.objects.filter(submission_id=submission_id).exists():
            return False
        try:
            with transaction.atomic():
                SurveyResponse.objects.create(
                    submission_id=submission_id or None,
                    timestamp=parse_timestamp(record['timestamp']),
                    answers=record['answers'],
                    feedback=record.get('feedback', ''),
                )
        except IntegrityError:
            # Concurrent delivery of the same submission_id.
            return False
        return True

    def read_all(self):
        try:
            return [r.as_record() for r in SurveyResponse.objects.order_by('id')]
        except DatabaseError as e:
            raise AggregationDataError(f"could not read responses: {e}") from e

    def clear(self):
        deleted, _ = SurveyResponse.objects.all().delete()
        return deleted


class RemoteStorage:
    def __init__(self, url, max_retries=None, retry_delay=None, timeout=None, session=None, sleep=time.sleep):
        self.url = url
        self.max_retries = settings.SURVEY_MAX_RETRIES if max_retries is None else max_retries
        self.retry_delay = settings.SURVEY_RETRY_DELAY if retry_delay is None else retry_delay
        self.timeout = settings.SURVEY_HTTP_TIMEOUT if timeout is None else timeout
        self.session = session
        self.sleep = sleep

    def append(self, record):
        submit(
            record,
            self.url,
            max_retries=self.max_retries,
            retry_delay=self.retry_delay,
            timeout=self.timeout,
            session=self.session,
            sleep=self.sleep,
        )
        return True

    def _fetch(self):
        http = self.session or requests
        response = http.get(self.url, params={'action': 'getResults'}, timeout=self.timeout)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise AggregationDataError("results payload is not an object")
        if 'error' in data:
            raise AggregationDataError(f"storage service error: {data['error']}")
        responses = data.get('responses')
        if not isinstance(responses, list):
            raise AggregationDataError("results payload has no 'responses' list")
        return responses

    def read_all(self):
        """Fetch every stored response, retrying up to max_retries more times."""
        if not self.url:
            raise AggregationDataError("storage service URL is not configured")

        last_error = None
        for attempt in range(self.max_retries + 1):
            try:
                return self._fetch()
            except (requests.RequestException, ValueError, AggregationDataError) as e:
                last_error = e
                print(f"  [results] load failed ({attempt + 1}/{self.max_retries + 1}): {e}")
                if attempt < self.max_retries:
                    self.sleep(self.retry_delay / 1000)

        raise AggregationDataError(f"could not load results: {last_error}") from last_error


def get_storage():
    backend = settings.SURVEY_STORAGE_BACKEND
    if backend == 'database':
        return DatabaseStorage()
    if backend == 'remote':
        return RemoteStorage(settings.SURVEY_STORAGE_URL)
    raise ImproperlyConfigured(f"Unknown SURVEY_STORAGE_BACKEND: {backend!r}")
