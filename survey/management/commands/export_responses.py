import csv

from django.core.management.base import BaseCommand

from survey.catalogue import load_catalogue
from survey.sheet import headers, record_to_row
from survey.storage import DatabaseStorage


class Command(BaseCommand):
    help = "Export stored survey responses as CSV in the spreadsheet layout"

    def add_arguments(self, parser):
        parser.add_argument(
            "--output",
            default="-",
            help="Output file (default: stdout)",
        )

    def handle(self, *args, **options):
        catalogue = load_catalogue()
        records = DatabaseStorage().read_all()

        if options["output"] == "-":
            self._write(self.stdout, records, catalogue)
            return

        with open(options["output"], "w", encoding="utf-8", newline="") as f:
            self._write(f, records, catalogue)
        self.stdout.write(self.style.SUCCESS(f"Exported {len(records)} responses to {options['output']}."))

    def _write(self, stream, records, catalogue):
        writer = csv.writer(stream)
        writer.writerow(headers(catalogue))
        for record in records:
            writer.writerow(record_to_row(record, catalogue))
