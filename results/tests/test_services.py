import random

from django.test import SimpleTestCase, override_settings

from results.services import (
    QuestionStats, aggregate, build_dashboard, generate_mock_responses, load_results, percentage,
)
from survey.catalogue import parse_catalogue
from survey.context import SurveyContext
from survey.storage import AggregationDataError

CATALOGUE = parse_catalogue({
    'questions': [
        {'id': 1, 'textRu': 'Вопрос 1', 'textEn': 'Question 1'},
        {'id': 2, 'textRu': 'Вопрос 2', 'textEn': 'Question 2'},
        {'id': 3, 'textRu': 'Вопрос 3', 'textEn': 'Question 3'},
    ],
})
QUESTIONS = CATALOGUE.questions


def response(answers, feedback=''):
    return {'timestamp': '2025-03-01T10:00:00.000Z', 'answers': answers, 'feedback': feedback}


class PercentageTests(SimpleTestCase):
    def test_rounds_half_up(self):
        self.assertEqual(percentage(1, 8), 13)  # 12.5
        self.assertEqual(percentage(3, 8), 38)  # 37.5
        self.assertEqual(percentage(1, 3), 33)
        self.assertEqual(percentage(2, 3), 67)

    def test_zero_total(self):
        self.assertEqual(percentage(0, 0), 0)


class AggregateTests(SimpleTestCase):
    def test_empty_dataset(self):
        results = aggregate([], QUESTIONS)

        self.assertEqual(results.total_count, 0)
        self.assertEqual(results.feedback_list, [])
        for question in QUESTIONS:
            self.assertEqual(results.per_question[question.id], QuestionStats())

    def test_single_response_is_all_or_nothing(self):
        results = aggregate([response({'question_1': 'yes', 'question_2': 'no'})], QUESTIONS)

        q1, q2, q3 = (results.per_question[i] for i in (1, 2, 3))
        self.assertEqual((q1.total_answers, q1.yes_percentage, q1.no_percentage), (1, 100, 0))
        self.assertEqual((q2.total_answers, q2.yes_percentage, q2.no_percentage), (1, 0, 100))
        self.assertEqual(q3, QuestionStats())

    def test_percentages_sum_to_100_for_yes_no_only(self):
        rng = random.Random(3)
        responses = [
            response({f'question_{q}': rng.choice(['yes', 'no']) for q in (1, 2, 3) if rng.random() > 0.2})
            for _ in range(37)
        ]

        results = aggregate(responses, QUESTIONS)

        for stats in results.per_question.values():
            self.assertEqual(stats.yes_count + stats.no_count, stats.total_answers)
            if stats.total_answers:
                self.assertEqual(stats.yes_percentage + stats.no_percentage, 100)

    def test_truthy_values_count_toward_total_only(self):
        responses = [
            response({'question_1': 'yes'}),
            response({'question_1': 'maybe'}),
            response({'question_1': ''}),
            response({'question_1': None}),
            response({'question_1': 0}),
            response({'question_1': 'no'}),
        ]

        stats = aggregate(responses, QUESTIONS).per_question[1]

        self.assertEqual(stats, QuestionStats(
            total_answers=3, yes_count=1, no_count=1, yes_percentage=33, no_percentage=33,
        ))

    def test_malformed_entries_skipped(self):
        responses = [
            'garbage',
            {'answers': None},
            {'answers': ['yes']},
            {},
            response({'question_1': 'yes'}),
        ]

        results = aggregate(responses, QUESTIONS)

        self.assertEqual(results.total_count, 5)
        self.assertEqual(results.per_question[1].total_answers, 1)

    def test_feedback_list(self):
        responses = [
            response({}, '  Great survey!  '),
            response({}, ''),
            response({}, '   '),
            {'answers': {}, 'feedback': 42},
            {'answers': {}, 'feedback': 0},
            {'answers': {}},
            response({}, 'Second'),
        ]

        self.assertEqual(aggregate(responses, QUESTIONS).feedback_list, ['Great survey!', '42', 'Second'])

    def test_idempotent(self):
        responses = [response({'question_1': 'yes'}, 'a'), response({'question_1': 'no', 'question_2': 'yes'})]
        self.assertEqual(aggregate(responses, QUESTIONS), aggregate(responses, QUESTIONS))
        self.assertEqual(aggregate(responses, QUESTIONS).as_dict(), aggregate(responses, QUESTIONS).as_dict())

    def test_as_dict(self):
        data = aggregate([response({'question_1': 'yes'}, 'x')], QUESTIONS).as_dict()

        self.assertEqual(data['totalCount'], 1)
        self.assertEqual(data['feedbackList'], ['x'])
        self.assertEqual(data['perQuestion']['1'], {
            'totalAnswers': 1, 'yesCount': 1, 'noCount': 0, 'yesPercentage': 100, 'noPercentage': 0,
        })


class MockDataTests(SimpleTestCase):
    def test_mock_responses_shape(self):
        responses = generate_mock_responses(QUESTIONS, rng=random.Random(1))

        self.assertTrue(10 <= len(responses) <= 60)
        for item in responses:
            self.assertEqual(set(item['answers']), {'question_1', 'question_2', 'question_3'})
            self.assertTrue(set(item['answers'].values()) <= {'yes', 'no'})
            self.assertTrue(item['feedback'] == '' or item['feedback'].startswith('Тестовый отзыв'))


class FailingStorage:
    def read_all(self):
        raise AggregationDataError("unreachable")


class LoadResultsTests(SimpleTestCase):
    @override_settings(SURVEY_MOCK_RESULTS_ON_ERROR=True)
    def test_falls_back_to_mock_data(self):
        responses, is_mock = load_results(storage=FailingStorage(), catalogue=CATALOGUE)
        self.assertTrue(is_mock)
        self.assertGreaterEqual(len(responses), 10)

    @override_settings(SURVEY_MOCK_RESULTS_ON_ERROR=False)
    def test_raises_without_fallback(self):
        with self.assertRaises(AggregationDataError):
            load_results(storage=FailingStorage(), catalogue=CATALOGUE)


class BuildDashboardTests(SimpleTestCase):
    def test_localized_rows(self):
        results = aggregate([response({'question_1': 'yes'})], QUESTIONS)

        rows = build_dashboard(results, SurveyContext(language='en', catalogue=CATALOGUE))

        self.assertEqual(rows[0]['text'], 'Question 1')
        self.assertEqual(rows[0]['yes_label'], 'Yes')
        self.assertEqual(rows[0]['responses_label'], 'Responses: 1')
        self.assertEqual(rows[1]['stats'].total_answers, 0)

        ru_rows = build_dashboard(results, SurveyContext(language='ru', catalogue=CATALOGUE))
        self.assertEqual(ru_rows[0]['responses_label'], 'Ответов: 1')
        self.assertEqual(ru_rows[0]['no_label'], 'Нет')
