import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / '.env')


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'django-insecure-opros-dev-key')

DEBUG = _env_bool('DJANGO_DEBUG', True)

ALLOWED_HOSTS = [h.strip() for h in os.getenv('DJANGO_ALLOWED_HOSTS', '*').split(',') if h.strip()]

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'survey',
    'results',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'opros.middleware.SurveyContextMiddleware',
]

ROOT_URLCONF = 'opros.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'opros.wsgi.application'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.getenv('DJANGO_DB_PATH', str(BASE_DIR / 'db.sqlite3')),
    }
}

LANGUAGE_CODE = 'ru'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Survey

# "database" keeps responses in this project's own table; "remote" talks to an
# external storage service (e.g. a spreadsheet web app) at SURVEY_STORAGE_URL.
SURVEY_STORAGE_BACKEND = os.getenv('SURVEY_STORAGE_BACKEND', 'database')
SURVEY_STORAGE_URL = os.getenv('SURVEY_STORAGE_URL', '')

SURVEY_MAX_RETRIES = int(os.getenv('SURVEY_MAX_RETRIES', '3'))
SURVEY_RETRY_DELAY = int(os.getenv('SURVEY_RETRY_DELAY', '1000'))  # milliseconds
SURVEY_HTTP_TIMEOUT = float(os.getenv('SURVEY_HTTP_TIMEOUT', '10'))  # seconds

SURVEY_MAX_FEEDBACK_LENGTH = int(os.getenv('SURVEY_MAX_FEEDBACK_LENGTH', '200'))
SURVEY_QUESTIONS_FILE = os.getenv('SURVEY_QUESTIONS_FILE', str(BASE_DIR / 'survey' / 'data' / 'questions.json'))
SURVEY_ENFORCE_REQUIRED = _env_bool('SURVEY_ENFORCE_REQUIRED', False)
SURVEY_MOCK_RESULTS_ON_ERROR = _env_bool('SURVEY_MOCK_RESULTS_ON_ERROR', DEBUG)
SURVEY_DEFAULT_LANGUAGE = os.getenv('SURVEY_DEFAULT_LANGUAGE', 'ru')
