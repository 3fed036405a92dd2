from django.core.management.base import BaseCommand

from survey.storage import DatabaseStorage


class Command(BaseCommand):
    help = "Delete every stored survey response"

    def add_arguments(self, parser):
        parser.add_argument(
            "--yes",
            action="store_true",
            help="Do not ask for confirmation",
        )

    def handle(self, *args, **options):
        if not options["yes"]:
            answer = input("This deletes all survey responses. Type 'yes' to continue: ")
            if answer.strip().lower() != "yes":
                self.stdout.write("Aborted.")
                return

        deleted = DatabaseStorage().clear()
        self.stdout.write(self.style.SUCCESS(f"Deleted {deleted} responses."))
