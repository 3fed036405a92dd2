from django.db import models

from .validation import MAX_SUBMISSION_ID_LENGTH, iso_timestamp


class SurveyResponse(models.Model):
    """One submitted survey. Rows are only ever appended."""

    submission_id = models.CharField(
        max_length=MAX_SUBMISSION_ID_LENGTH,
        unique=True,
        null=True,
        blank=True,
        help_text="Client-generated identifier used to drop duplicate deliveries.",
    )
    timestamp = models.DateTimeField()
    answers = models.JSONField(default=dict)  # {"question_1": "yes", ...}
    feedback = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"Response {self.id} at {self.timestamp:%Y-%m-%d %H:%M}"

    def as_record(self):
        return {
            'timestamp': iso_timestamp(self.timestamp),
            'answers': dict(self.answers or {}),
            'feedback': self.feedback or '',
        }
