import csv

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from survey.catalogue import load_catalogue
from survey.sheet import row_to_record
from survey.storage import DatabaseStorage
from survey.validation import ValidationError, validate


class Command(BaseCommand):
    help = "Import survey responses from a spreadsheet CSV export (Timestamp, Question 1..N, Feedback)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--csv",
            required=True,
            help="Path to the CSV file",
        )
        parser.add_argument(
            "--delimiter",
            default=",",
            help="Column delimiter (default: ',')",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Print what would be imported without writing to the database",
        )

    def handle(self, *args, **options):
        csv_path = options["csv"]
        dry_run = options["dry_run"]
        catalogue = load_catalogue()

        try:
            with open(csv_path, encoding="utf-8-sig", newline="") as f:
                rows = list(csv.DictReader(f, delimiter=options["delimiter"]))
        except OSError as e:
            raise CommandError(f"Cannot read {csv_path}: {e}") from e

        records = []
        skipped = 0
        for line_no, row in enumerate(rows, start=2):
            try:
                records.append(validate(
                    row_to_record(row, catalogue),
                    catalogue=catalogue,
                    max_feedback_length=settings.SURVEY_MAX_FEEDBACK_LENGTH,
                ))
            except ValidationError as e:
                skipped += 1
                self.stdout.write(self.style.WARNING(f"  line {line_no}: skipped ({e})"))

        self.stdout.write(f"Found {len(records)} valid responses in {csv_path}")

        if dry_run:
            self.stdout.write("Dry run: no changes written.")
            for record in records[:5]:
                self.stdout.write(f"  {record['timestamp']}: {record['answers']} {record['feedback'][:80]}")
            return

        storage = DatabaseStorage()
        imported = sum(1 for record in records if storage.append(record))

        self.stdout.write(self.style.SUCCESS(f"Imported {imported} responses ({skipped} skipped)."))
