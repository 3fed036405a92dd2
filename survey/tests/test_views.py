import json
from unittest import mock

from django.test import TestCase, override_settings
from django.urls import reverse

from survey.models import SurveyResponse
from survey.transport import TransportError


class CollectorApiTests(TestCase):
    def setUp(self):
        self.url = reverse('collector')

    def test_multipart_data_field(self):
        payload = {'answers': {'question_1': 'yes', 'question_2': 'no'}, 'feedback': 'Great <b>survey</b>!'}

        response = self.client.post(self.url, {'data': json.dumps(payload)})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'success': True, 'message': 'Data saved successfully'})
        saved = SurveyResponse.objects.get()
        self.assertEqual(saved.answers, {'question_1': 'yes', 'question_2': 'no'})
        self.assertEqual(saved.feedback, 'Great bsurvey/b!')

    def test_raw_json_body(self):
        payload = {'answers': {'question_3': 'no'}}

        response = self.client.post(self.url, data=json.dumps(payload), content_type='text/plain')

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()['success'])
        self.assertEqual(SurveyResponse.objects.get().answers, {'question_3': 'no'})

    def test_unknown_question_keys_dropped(self):
        payload = {'answers': {'question_1': 'yes', 'question_42': 'no'}}
        self.client.post(self.url, data=json.dumps(payload), content_type='application/json')
        self.assertEqual(SurveyResponse.objects.get().answers, {'question_1': 'yes'})

    def test_missing_answers_rejected(self):
        response = self.client.post(self.url, data=json.dumps({'feedback': 'hi'}), content_type='application/json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'success': False, 'error': 'missing answers'})
        self.assertFalse(SurveyResponse.objects.exists())

    def test_non_object_rejected(self):
        response = self.client.post(self.url, data='[1, 2]', content_type='application/json')
        self.assertEqual(response.json(), {'success': False, 'error': 'invalid format'})

    def test_invalid_json(self):
        response = self.client.post(self.url, data='{not json', content_type='text/plain')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Invalid JSON')

    def test_form_without_data_field(self):
        response = self.client.post(self.url, {'other': 'x'})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()['success'])

    def test_duplicate_submission_ignored(self):
        payload = json.dumps({'answers': {'question_1': 'yes'}, 'submission_id': 'abc123'})

        self.client.post(self.url, {'data': payload})
        response = self.client.post(self.url, {'data': payload})

        self.assertEqual(response.json(), {'success': True, 'message': 'Duplicate submission ignored'})
        self.assertEqual(SurveyResponse.objects.count(), 1)

    def test_get_results(self):
        self.client.post(self.url, {'data': json.dumps({
            'timestamp': '2025-03-01T10:00:00.000Z',
            'answers': {'question_1': 'yes'},
            'feedback': 'Спасибо',
        })})

        response = self.client.get(self.url, {'action': 'getResults'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {
            'responses': [{
                'timestamp': '2025-03-01T10:00:00.000Z',
                'answers': {'question_1': 'yes'},
                'feedback': 'Спасибо',
            }],
            'totalCount': 1,
        })

    def test_get_results_empty(self):
        response = self.client.get(self.url, {'action': 'getResults'})
        self.assertEqual(response.json(), {'responses': [], 'totalCount': 0})

    def test_invalid_action(self):
        for params in ({}, {'action': 'dropTable'}):
            with self.subTest(params=params):
                response = self.client.get(self.url, params)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {'error': 'Invalid action'})


@override_settings(SURVEY_STORAGE_BACKEND='database')
class SurveyPageTests(TestCase):
    def setUp(self):
        self.url = reverse('survey')

    def test_renders_russian_by_default(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Отправить')
        self.assertContains(response, 'name="question_1"')
        self.assertContains(response, 'name="submission_id"')

    def test_language_switch_is_remembered(self):
        self.client.get(self.url, {'lang': 'en'})
        response = self.client.get(self.url)

        self.assertContains(response, 'Submit')
        self.assertContains(response, '<html lang="en">')

    def test_unknown_language_ignored(self):
        response = self.client.get(self.url, {'lang': 'de'})
        self.assertContains(response, 'Отправить')

    def test_submit_stores_response(self):
        response = self.client.post(self.url, {
            'question_1': 'yes',
            'question_2': 'no',
            'question_3': 'maybe',
            'feedback': '  Great survey!  ',
            'submission_id': 'form-1',
        })

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Спасибо! Ваши ответы сохранены.')
        saved = SurveyResponse.objects.get()
        self.assertEqual(saved.answers, {'question_1': 'yes', 'question_2': 'no'})
        self.assertEqual(saved.feedback, 'Great survey!')
        self.assertEqual(saved.submission_id, 'form-1')

    def test_double_submit_stores_once(self):
        data = {'question_1': 'yes', 'submission_id': 'form-2'}
        self.client.post(self.url, data)
        self.client.post(self.url, data)
        self.assertEqual(SurveyResponse.objects.count(), 1)

    @override_settings(SURVEY_ENFORCE_REQUIRED=True)
    def test_missing_required_answer_shows_error(self):
        response = self.client.post(self.url, {'question_1': 'yes', 'feedback': 'partial'})

        self.assertEqual(response.status_code, 400)
        self.assertContains(response, 'Ошибка отправки. Пожалуйста, попробуйте еще раз.', status_code=400)
        self.assertContains(response, 'partial', status_code=400)
        self.assertFalse(SurveyResponse.objects.exists())

    @override_settings(SURVEY_STORAGE_BACKEND='remote', SURVEY_STORAGE_URL='https://storage.example.com/exec')
    def test_transport_failure_returns_to_form(self):
        with mock.patch('survey.storage.submit', side_effect=TransportError("down", attempts=3)):
            response = self.client.post(self.url + '?lang=en', {'question_1': 'yes'})

        self.assertEqual(response.status_code, 400)
        self.assertContains(response, 'Submission failed. Please try again.', status_code=400)
        self.assertContains(response, 'checked', status_code=400)

    @override_settings(SURVEY_STORAGE_BACKEND='remote', SURVEY_STORAGE_URL='https://storage.example.com/exec')
    def test_transport_failure_keeps_submission_id(self):
        with mock.patch('survey.storage.submit', side_effect=TransportError("down", attempts=3)):
            response = self.client.post(self.url, {'question_1': 'yes', 'submission_id': 'abc123'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.context['submission_id'], 'abc123')
        self.assertContains(response, 'name="submission_id" value="abc123"', status_code=400)

    def test_fresh_form_gets_new_submission_id(self):
        first = self.client.get(self.url).context['submission_id']
        second = self.client.get(self.url).context['submission_id']

        self.assertTrue(first)
        self.assertNotEqual(first, second)

    @override_settings(SURVEY_STORAGE_BACKEND='remot')
    def test_unexpected_failure_shows_submit_error(self):
        response = self.client.post(self.url + '?lang=en', {'question_1': 'no', 'submission_id': 'xyz789'})

        self.assertEqual(response.status_code, 500)
        self.assertContains(response, 'Submission failed. Please try again.', status_code=500)
        self.assertEqual(response.context['submission_id'], 'xyz789')
        self.assertFalse(SurveyResponse.objects.exists())


class QuestionsApiTests(TestCase):
    def test_returns_catalogue(self):
        response = self.client.get(reverse('survey_questions'))

        data = response.json()
        self.assertEqual(len(data['questions']), 10)
        self.assertEqual(data['questions'][0]['id'], 1)
        self.assertEqual(data['options']['yesEn'], 'Yes')
