"""Spreadsheet row layout: Timestamp, Question 1..N, Feedback."""

TIMESTAMP_HEADER = 'Timestamp'
FEEDBACK_HEADER = 'Feedback'


def headers(catalogue):
    return [TIMESTAMP_HEADER] + [f"Question {q.id}" for q in catalogue.questions] + [FEEDBACK_HEADER]


def record_to_row(record, catalogue):
    answers = record.get('answers') or {}
    return (
        [record.get('timestamp', '')]
        + [answers.get(q.key) or '' for q in catalogue.questions]
        + [record.get('feedback') or '']
    )


def row_to_record(row, catalogue):
    """Convert a csv.DictReader row back into a raw submission."""
    answers = {}
    for question in catalogue.questions:
        value = (row.get(f"Question {question.id}") or '').strip()
        if value:
            answers[question.key] = value
    return {
        'timestamp': (row.get(TIMESTAMP_HEADER) or '').strip(),
        'answers': answers,
        'feedback': (row.get(FEEDBACK_HEADER) or '').strip(),
    }
