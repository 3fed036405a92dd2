import time

import requests
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from survey.catalogue import load_catalogue
from survey.transport import TransportError, submit
from survey.validation import iso_timestamp


class Command(BaseCommand):
    help = "Smoke-test a storage endpoint: submit one response, then fetch getResults"

    def add_arguments(self, parser):
        parser.add_argument("url", nargs="?", default=None, help="Endpoint URL (default: SURVEY_STORAGE_URL)")
        parser.add_argument("--wait", type=float, default=2.0, help="Seconds to wait between submit and fetch")

    def handle(self, *args, **options):
        url = options["url"] or settings.SURVEY_STORAGE_URL
        if not url:
            raise CommandError("No endpoint URL given and SURVEY_STORAGE_URL is not set.")

        catalogue = load_catalogue()
        test_data = {
            "timestamp": iso_timestamp(),
            "answers": {q.key: "yes" if i % 2 == 0 else "no" for i, q in enumerate(catalogue.questions)},
            "feedback": "Quick test message",
        }

        self.stdout.write(f"Submitting test response to {url}...")
        try:
            submit(
                test_data,
                url,
                max_retries=settings.SURVEY_MAX_RETRIES,
                retry_delay=settings.SURVEY_RETRY_DELAY,
                timeout=settings.SURVEY_HTTP_TIMEOUT,
            )
            submit_ok = True
        except TransportError as e:
            self.stdout.write(self.style.ERROR(f"  submit failed: {e}"))
            submit_ok = False

        time.sleep(options["wait"])

        self.stdout.write("Fetching results...")
        results = None
        try:
            response = requests.get(url, params={"action": "getResults"}, timeout=settings.SURVEY_HTTP_TIMEOUT)
            response.raise_for_status()
            results = response.json()
        except (requests.RequestException, ValueError) as e:
            self.stdout.write(self.style.ERROR(f"  get results failed: {e}"))

        self.stdout.write("\nSummary:")
        self.stdout.write(f"  Submit data: {'PASSED' if submit_ok else 'FAILED'}")
        self.stdout.write(f"  Get results: {'PASSED' if results is not None else 'FAILED'}")
        if isinstance(results, dict):
            self.stdout.write(f"  Total responses: {results.get('totalCount', 0)}")

        if not (submit_ok and results is not None):
            raise CommandError("Endpoint check failed.")
