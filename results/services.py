import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from django.conf import settings

from survey.catalogue import question_key
from survey.storage import AggregationDataError, get_storage
from survey.validation import iso_timestamp


@dataclass(frozen=True)
class QuestionStats:
    total_answers: int = 0
    yes_count: int = 0
    no_count: int = 0
    yes_percentage: int = 0
    no_percentage: int = 0

    def as_dict(self):
        return {
            'totalAnswers': self.total_answers,
            'yesCount': self.yes_count,
            'noCount': self.no_count,
            'yesPercentage': self.yes_percentage,
            'noPercentage': self.no_percentage,
        }


@dataclass(frozen=True)
class SurveyResults:
    per_question: dict = field(default_factory=dict)  # question id -> QuestionStats
    feedback_list: list = field(default_factory=list)
    total_count: int = 0

    def as_dict(self):
        return {
            'totalCount': self.total_count,
            'perQuestion': {str(qid): stats.as_dict() for qid, stats in self.per_question.items()},
            'feedbackList': list(self.feedback_list),
        }


def percentage(count, total):
    """Whole percent of count/total, rounding halves up (12.5 -> 13). 0 when total is 0."""
    if total <= 0:
        return 0
    return (200 * count + total) // (2 * total)


def question_stats(responses, question_id):
    """
    Count yes/no answers for one question.

    Any truthy value counts toward total_answers; only the literals "yes" and
    "no" count toward the yes/no tallies. Responses without an answers mapping
    are skipped.
    """
    key = question_key(question_id)
    values = []
    for response in responses:
        answers = response.get('answers') if isinstance(response, dict) else None
        if not isinstance(answers, dict):
            continue
        value = answers.get(key)
        if value:
            values.append(value)

    total = len(values)
    yes_count = sum(1 for v in values if v == 'yes')
    no_count = sum(1 for v in values if v == 'no')

    return QuestionStats(
        total_answers=total,
        yes_count=yes_count,
        no_count=no_count,
        yes_percentage=percentage(yes_count, total),
        no_percentage=percentage(no_count, total),
    )


def feedback_texts(responses):
    texts = []
    for response in responses:
        if not isinstance(response, dict):
            continue
        feedback = response.get('feedback')
        if not feedback:
            continue
        text = str(feedback).strip()
        if text:
            texts.append(text)
    return texts


def aggregate(responses, questions):
    """Aggregate stored responses into per-question stats and the feedback list."""
    responses = list(responses)
    return SurveyResults(
        per_question={q.id: question_stats(responses, q.id) for q in questions},
        feedback_list=feedback_texts(responses),
        total_count=len(responses),
    )


def generate_mock_responses(questions, rng=None):
    """Random yes/no responses for development when the real data cannot be loaded."""
    rng = rng or random.Random()
    now = datetime.now(timezone.utc)
    responses = []
    for i in range(rng.randint(10, 60)):
        responses.append({
            'timestamp': iso_timestamp(now - timedelta(seconds=rng.random() * 86400)),
            'answers': {q.key: 'yes' if rng.random() > 0.5 else 'no' for q in questions},
            'feedback': f"Тестовый отзыв {i + 1}" if rng.random() > 0.7 else '',
        })
    return responses


def load_results(storage=None, catalogue=None):
    """
    Read every stored response.

    Returns (responses, is_mock). When storage cannot be read and
    SURVEY_MOCK_RESULTS_ON_ERROR is set, a synthetic dataset is returned
    instead; otherwise AggregationDataError propagates.
    """
    storage = storage or get_storage()
    try:
        return storage.read_all(), False
    except AggregationDataError as e:
        if not settings.SURVEY_MOCK_RESULTS_ON_ERROR or catalogue is None:
            raise
        print(f"  [results] using mock data: {e}")
        return generate_mock_responses(catalogue.questions), True


def build_dashboard(results, context):
    """Localized rows for the results template."""
    catalogue = context.catalogue
    rows = []
    for question in catalogue.questions:
        stats = results.per_question.get(question.id, QuestionStats())
        rows.append({
            'id': question.id,
            'text': question.text(context.language),
            'yes_label': catalogue.yes_label(context.language),
            'no_label': catalogue.no_label(context.language),
            'stats': stats,
            'responses_label': context.t('responses_count', count=stats.total_answers),
        })
    return rows
