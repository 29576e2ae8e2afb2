"""
Django settings for dsp_test_project project.

For the full list of settings and their values, see
https://docs.djangoproject.com/en/stable/ref/settings/
"""

# Build paths inside the project like this: os.path.join(BASE_DIR, ...)
import os
import sys

BASE_DIR = os.path.dirname(os.path.dirname(__file__))

sys.path.insert(0, BASE_DIR)

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = 'k3v!x0w2f&8u#h9q@p1s6m_r4t7z(c5e)b-n+y=dj$a^lgoi'

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = True

ALLOWED_HOSTS = []

# Application definition

INSTALLED_APPS = [
    'django_search_path',

    'django.contrib.auth',
    'django.contrib.contenttypes',
]

TEST_RUNNER = 'django.test.runner.DiscoverRunner'

ROOT_URLCONF = 'dsp_test_project.urls'

# Database
# https://docs.djangoproject.com/en/stable/ref/settings/#databases

DATABASES = {
    'default': {
        'ENGINE': 'django_search_path.postgresql_backend',
        'NAME': os.environ.get('DATABASE_DB', 'dsp_test_project'),
        'USER': os.environ.get('DATABASE_USER', 'postgres'),
        'PASSWORD': os.environ.get('DATABASE_PASSWORD', 'root'),
        'HOST': os.environ.get('DATABASE_HOST', 'localhost'),
        'PORT': os.environ.get('DATABASE_PORT', 5432),
        'OPTIONS': {
            'connect_timeout': 3,
        },
    }
}

PUBLIC_SCHEMA_NAME = 'public'

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'filters': {
        'search_path': {
            '()': 'django_search_path.log.SearchPathContextFilter',
        },
    },
    'formatters': {
        'search_path': {
            'format': '[%(search_path)s] %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'level': 'WARNING',
            'class': 'logging.StreamHandler',
            'filters': ['search_path'],
            'formatter': 'search_path',
        },
    },
    'loggers': {
        'django_search_path': {
            'handlers': ['console'],
            'level': 'DEBUG',
        },
    },
}

# Internationalization

LANGUAGE_CODE = 'en-us'

TIME_ZONE = 'UTC'

USE_I18N = True

USE_TZ = False

DEFAULT_AUTO_FIELD = "django.db.models.AutoField"
