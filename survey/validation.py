from datetime import datetime, timezone

from django.utils.dateparse import parse_datetime

MAX_FEEDBACK_LENGTH = 200
MAX_SUBMISSION_ID_LENGTH = 64


class ValidationError(Exception):
    pass


def iso_timestamp(dt=None):
    """Format `dt` (default: now) as ISO-8601 UTC with milliseconds, e.g. 2025-03-01T10:00:00.000Z."""
    dt = dt or datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def parse_timestamp(value):
    """Parse an ISO-8601 string into an aware datetime, or return None."""
    try:
        dt = parse_datetime(value)
    except ValueError:
        return None
    if dt is not None and dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def clean_feedback(feedback, max_length=MAX_FEEDBACK_LENGTH):
    """Truncate to `max_length`, then strip every '<' and '>'."""
    text = str(feedback)
    if len(text) > max_length:
        text = text[:max_length]
    return text.replace('<', '').replace('>', '')


def validate(raw, catalogue=None, enforce_required=False, max_feedback_length=MAX_FEEDBACK_LENGTH):
    """
    Check the shape of an incoming submission and return a normalized copy.

    Raises ValidationError for a non-object payload, missing answers, an
    unparseable timestamp or a malformed submission id. With a catalogue,
    answer keys outside the catalogue are dropped, and when enforce_required
    is set every required question needs an answer.
    """
    if not isinstance(raw, dict):
        raise ValidationError("invalid format")

    answers = raw.get('answers')
    if not isinstance(answers, dict):
        raise ValidationError("missing answers")

    if catalogue is not None:
        allowed = set(catalogue.question_keys)
        answers = {k: v for k, v in answers.items() if k in allowed}
        if enforce_required:
            for question in catalogue.questions:
                if question.required and not answers.get(question.key):
                    raise ValidationError(f"missing required answer: {question.key}")
    else:
        answers = dict(answers)

    timestamp = raw.get('timestamp')
    if not timestamp:
        timestamp = iso_timestamp()
    elif not isinstance(timestamp, str) or parse_timestamp(timestamp) is None:
        raise ValidationError("invalid timestamp")

    record = {
        'timestamp': timestamp,
        'answers': answers,
        'feedback': '',
    }

    feedback = raw.get('feedback')
    if feedback:
        record['feedback'] = clean_feedback(feedback, max_feedback_length)

    submission_id = raw.get('submission_id')
    if submission_id is not None:
        if not isinstance(submission_id, str) or not submission_id or len(submission_id) > MAX_SUBMISSION_ID_LENGTH:
            raise ValidationError("invalid submission id")
        record['submission_id'] = submission_id

    return record
