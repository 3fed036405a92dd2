from django.contrib import admin

from .models import SurveyResponse


@admin.register(SurveyResponse)
class SurveyResponseAdmin(admin.ModelAdmin):
    list_display = ['id', 'timestamp', 'answer_summary', 'feedback', 'created_at']
    search_fields = ['feedback', 'submission_id']
    readonly_fields = ['submission_id', 'timestamp', 'answers', 'feedback', 'created_at']

    def answer_summary(self, obj):
        return ", ".join(f"{key.removeprefix('question_')}:{value}" for key, value in (obj.answers or {}).items())

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
