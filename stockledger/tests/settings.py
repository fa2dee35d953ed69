"""
Django settings for running the Stockledger test suite.

SQLite by default. Set STOCKLEDGER_TEST_DB=postgres (plus the usual
POSTGRES_* variables) to run against PostgreSQL, which enables the
threaded concurrency tests.
"""

import os

SECRET_KEY = 'stockledger-tests'
DEBUG = False
USE_TZ = True
TIME_ZONE = 'UTC'
LANGUAGE_CODE = 'es'

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'stockledger',
]

MIDDLEWARE = [
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
]

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
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

if os.environ.get('STOCKLEDGER_TEST_DB') == 'postgres':
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.environ.get('POSTGRES_DB', 'stockledger'),
            'USER': os.environ.get('POSTGRES_USER', 'postgres'),
            'PASSWORD': os.environ.get('POSTGRES_PASSWORD', ''),
            'HOST': os.environ.get('POSTGRES_HOST', 'localhost'),
            'PORT': os.environ.get('POSTGRES_PORT', '5432'),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': ':memory:',
        }
    }

ROOT_URLCONF = 'stockledger.tests.urls'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

STOCKLEDGER = {
    'DEFAULT_ACTOR': 'sistema',
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'null': {'class': 'logging.NullHandler'},
    },
    'loggers': {
        'stockledger': {'handlers': ['null'], 'level': 'DEBUG'},
    },
}
