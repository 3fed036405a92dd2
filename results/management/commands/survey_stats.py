from django.core.management.base import BaseCommand, CommandError

from survey.catalogue import load_catalogue
from survey.storage import AggregationDataError, get_storage
from results.services import aggregate


class Command(BaseCommand):
    help = "Print per-question yes/no statistics for the stored responses"

    def handle(self, *args, **options):
        catalogue = load_catalogue()
        try:
            responses = get_storage().read_all()
        except AggregationDataError as e:
            raise CommandError(str(e)) from e

        if not responses:
            self.stdout.write("No data found.")
            return

        results = aggregate(responses, catalogue.questions)
        self.stdout.write(f"Total responses: {results.total_count}")
        for question in catalogue.questions:
            stats = results.per_question[question.id]
            self.stdout.write(
                f"  {question.key}: yes {stats.yes_count} ({stats.yes_percentage}%), "
                f"no {stats.no_count} ({stats.no_percentage}%), answered {stats.total_answers}"
            )
        self.stdout.write(f"Feedback entries: {len(results.feedback_list)}")
