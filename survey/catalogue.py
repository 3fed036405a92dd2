"""
Question catalogue.

The catalogue is a JSON document:

    {
      "questions": [{"id": 1, "textRu": "...", "textEn": "...", "required": true}, ...],
      "options": {"yesRu": "Да", "yesEn": "Yes", "noRu": "Нет", "noEn": "No"}
    }

It is read once per process and never modified afterwards.
"""

import json
from dataclasses import dataclass
from functools import lru_cache


class CatalogueError(Exception):
    pass


@dataclass(frozen=True)
class Question:
    id: int
    text_ru: str
    text_en: str
    required: bool = False

    @property
    def key(self):
        return question_key(self.id)

    def text(self, language):
        return self.text_en if language == 'en' else self.text_ru

    def as_dict(self):
        return {'id': self.id, 'textRu': self.text_ru, 'textEn': self.text_en, 'required': self.required}


@dataclass(frozen=True)
class Catalogue:
    questions: tuple
    yes_ru: str = 'Да'
    yes_en: str = 'Yes'
    no_ru: str = 'Нет'
    no_en: str = 'No'

    @property
    def question_keys(self):
        return [q.key for q in self.questions]

    def yes_label(self, language):
        return self.yes_en if language == 'en' else self.yes_ru

    def no_label(self, language):
        return self.no_en if language == 'en' else self.no_ru

    def as_dict(self):
        return {
            'questions': [q.as_dict() for q in self.questions],
            'options': {'yesRu': self.yes_ru, 'yesEn': self.yes_en, 'noRu': self.no_ru, 'noEn': self.no_en},
        }


def question_key(question_id):
    return f"question_{question_id}"


def parse_catalogue(data):
    """Build a Catalogue from the decoded JSON document."""
    if not isinstance(data, dict) or not isinstance(data.get('questions'), list):
        raise CatalogueError("catalogue must be an object with a 'questions' list")

    questions = []
    seen = set()
    for item in data['questions']:
        if not isinstance(item, dict):
            raise CatalogueError(f"invalid question entry: {item!r}")
        qid = item.get('id')
        if not isinstance(qid, int) or isinstance(qid, bool) or qid < 1:
            raise CatalogueError(f"question id must be a positive integer, got {qid!r}")
        if qid in seen:
            raise CatalogueError(f"duplicate question id {qid}")
        seen.add(qid)
        questions.append(Question(
            id=qid,
            text_ru=str(item.get('textRu', '')),
            text_en=str(item.get('textEn', '')),
            required=bool(item.get('required', False)),
        ))

    options = data.get('options')
    if options is None:
        options = {}
    if not isinstance(options, dict):
        raise CatalogueError("'options' must be an object")

    return Catalogue(
        questions=tuple(questions),
        yes_ru=options.get('yesRu', 'Да'),
        yes_en=options.get('yesEn', 'Yes'),
        no_ru=options.get('noRu', 'Нет'),
        no_en=options.get('noEn', 'No'),
    )


def load_catalogue(path=None):
    """Load the catalogue from `path` (defaults to settings.SURVEY_QUESTIONS_FILE)."""
    if path is None:
        from django.conf import settings
        path = settings.SURVEY_QUESTIONS_FILE
    return _load_catalogue_file(str(path))


@lru_cache(maxsize=None)
def _load_catalogue_file(path):
    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogueError(f"cannot read question catalogue {path}: {e}") from e

    return parse_catalogue(data)
