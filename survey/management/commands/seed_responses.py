import random
from datetime import datetime, timedelta, timezone

from django.core.management.base import BaseCommand

from survey.catalogue import load_catalogue
from survey.storage import DatabaseStorage
from survey.validation import iso_timestamp, validate

FEEDBACK = [
    "Очень понравился курс, спасибо преподавателям!",
    "Хотелось бы больше практических заданий.",
    "Great course, the assignments were well thought out.",
    "Расписание иногда менялось в последний момент.",
    "Платформа пару раз зависала во время тестов.",
    "The recorded lectures were really helpful for revision.",
    "Спасибо за подробную обратную связь по домашним заданиям.",
    "Some of the materials could use more examples.",
    "Было бы удобно получать материалы заранее.",
    "I would definitely sign up for the next course.",
    "Немного не хватало времени на последний проект.",
    "Clear explanations and friendly instructors.",
]


class Command(BaseCommand):
    help = "Seed the database with synthetic survey responses"

    def add_arguments(self, parser):
        parser.add_argument("--count", type=int, default=40, help="Number of responses to create (default: 40)")
        parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data")
        parser.add_argument(
            "--yes-rate",
            type=float,
            default=0.6,
            help="Probability of a 'yes' answer (default: 0.6)",
        )

    def handle(self, *args, **options):
        rng = random.Random(options["seed"])
        catalogue = load_catalogue()
        storage = DatabaseStorage()
        now = datetime.now(timezone.utc)

        created = 0
        for _ in range(options["count"]):
            answers = {}
            for question in catalogue.questions:
                # Optional questions are sometimes left blank.
                if not question.required and rng.random() < 0.2:
                    continue
                answers[question.key] = "yes" if rng.random() < options["yes_rate"] else "no"

            record = validate({
                "timestamp": iso_timestamp(now - timedelta(minutes=rng.randint(0, 7 * 24 * 60))),
                "answers": answers,
                "feedback": rng.choice(FEEDBACK) if rng.random() < 0.4 else "",
            }, catalogue=catalogue)
            if storage.append(record):
                created += 1

        self.stdout.write(self.style.SUCCESS(f"Created {created} responses."))
