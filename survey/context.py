from dataclasses import dataclass

from .catalogue import Catalogue

LANGUAGES = ('ru', 'en')

# (ru, en)
STRINGS = {
    'title': ('Опрос', 'Survey'),
    'subtitle': ('Ответьте, пожалуйста, на несколько вопросов', 'Please answer a few questions'),
    'feedback_label': ('Ваш отзыв (необязательно)', 'Your feedback (optional)'),
    'feedback_placeholder': ('Поделитесь своим мнением...', 'Share your thoughts...'),
    'submit': ('Отправить', 'Submit'),
    'sending': ('Отправляем...', 'Sending...'),
    'success': ('Спасибо! Ваши ответы сохранены.', 'Thank you! Your answers have been saved.'),
    'submit_error': ('Ошибка отправки. Пожалуйста, попробуйте еще раз.', 'Submission failed. Please try again.'),
    'load_error': ('Ошибка загрузки опроса. Пожалуйста, обновите страницу.', 'Failed to load the survey. Please refresh the page.'),
    'results_title': ('Результаты опроса', 'Survey results'),
    'total_responses': ('Всего ответов:', 'Total responses:'),
    'responses_count': ('Ответов: {count}', 'Responses: {count}'),
    'feedback_title': ('Отзывы', 'Feedback'),
    'no_feedback': ('Пока нет отзывов', 'No feedback yet'),
    'refresh': ('Обновить', 'Refresh'),
    'results_error': ('Не удалось загрузить результаты', 'Failed to load results'),
    'mock_notice': ('Показаны тестовые данные', 'Showing test data'),
    'view_results': ('Посмотреть результаты', 'View results'),
    'back_to_survey': ('Вернуться к опросу', 'Back to the survey'),
}


@dataclass(frozen=True)
class SurveyContext:
    """Per-request display state: language and question catalogue."""

    language: str
    catalogue: Catalogue = None

    @property
    def other_language(self):
        return 'en' if self.language == 'ru' else 'ru'

    def text(self, ru_text, en_text):
        return en_text if self.language == 'en' else ru_text

    def t(self, key, **kwargs):
        ru_text, en_text = STRINGS[key]
        value = self.text(ru_text, en_text)
        return value.format(**kwargs) if kwargs else value

    def strings(self):
        return {key: self.text(*pair) for key, pair in STRINGS.items()}
