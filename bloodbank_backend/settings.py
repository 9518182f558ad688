# bloodbank_backend/settings.py
"""
Django settings for the blood bank backend.

Every deploy-specific value comes from the environment; a local `.env`
file is loaded first when present.
"""
import os
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / '.env')


def env_list(name, default=''):
    """Comma separated environment variable -> list of stripped values"""
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(',') if item.strip()]


SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'dev-only-secret-key-change-me')
DEBUG = os.environ.get('DJANGO_DEBUG', 'False').lower() in ('1', 'true', 'yes')
ALLOWED_HOSTS = env_list('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver')

SERVER_NAME = 'Blood Bank Backend'
SERVER_VERSION = '1.0.0'
ENVIRONMENT = os.environ.get('DJANGO_ENV', 'development')

# ========================================
# APPLICATIONS
# ========================================
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    'rest_framework',
    'rest_framework_simplejwt',
    'corsheaders',

    'accounts',
    'donors',
    'patients',
    'bloodbanks',
    'donations',
    'api',
]

MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'bloodbank_backend.urls'
WSGI_APPLICATION = 'bloodbank_backend.wsgi.application'

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

# ========================================
# DATABASE
# ========================================
DB_ENGINE = os.environ.get('DB_ENGINE', 'django.db.backends.sqlite3')

if DB_ENGINE.endswith('sqlite3'):
    DATABASES = {
        'default': {
            'ENGINE': DB_ENGINE,
            'NAME': os.environ.get('DB_NAME', str(BASE_DIR / 'db.sqlite3')),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': DB_ENGINE,
            'NAME': os.environ.get('DB_NAME', 'bloodbank'),
            'USER': os.environ.get('DB_USER', 'postgres'),
            'PASSWORD': os.environ.get('DB_PASSWORD', ''),
            'HOST': os.environ.get('DB_HOST', 'localhost'),
            'PORT': os.environ.get('DB_PORT', '5432'),
        }
    }

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ========================================
# AUTHENTICATION
# ========================================
AUTH_USER_MODEL = 'accounts.CustomUser'

AUTHENTICATION_BACKENDS = [
    'accounts.backends.EmailBackend',
    'django.contrib.auth.backends.ModelBackend',
]

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
     'OPTIONS': {'min_length': 8}},
]

SUPERUSER_SECRET_KEY = os.environ.get('SUPERUSER_SECRET_KEY')

AUTH_COOKIE_NAME = 'authToken'
AUTH_COOKIE_MAX_AGE = 7 * 24 * 60 * 60  # 7 days

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'accounts.authentication.CookieJWTAuthentication',
        'rest_framework.authentication.SessionAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'EXCEPTION_HANDLER': 'bloodbank_backend.exceptions.api_exception_handler',
}

SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(minutes=int(os.environ.get('JWT_ACCESS_MINUTES', 60 * 24 * 7))),
    'REFRESH_TOKEN_LIFETIME': timedelta(days=30),
    'USER_ID_CLAIM': 'user_id',
}

# ========================================
# CORS
# ========================================
CORS_ALLOWED_ORIGINS = [
    'http://localhost:3000',
    'http://localhost:3001',
    'https://bb-frontend-seven.vercel.app',
    'https://bloodbank-frontend.vercel.app',
] + env_list('ADDITIONAL_CORS_ORIGINS')
CORS_ALLOW_CREDENTIALS = True
CORS_EXPOSE_HEADERS = ['Content-Length', 'Content-Range', 'Set-Cookie']
CORS_PREFLIGHT_MAX_AGE = 86400

# ========================================
# DONATIONS & CERTIFICATES
# ========================================
BLOOD_UNIT_SHELF_LIFE_DAYS = int(os.environ.get('BLOOD_UNIT_SHELF_LIFE_DAYS', 35))

AWS_REGION = os.environ.get('AWS_REGION', 'us-east-1')
CERTIFICATE_BUCKET = os.environ.get('CERTIFICATE_BUCKET', 'bloodbank-certificates')
CERTIFICATE_PUBLIC_BASE_URL = os.environ.get(
    'CERTIFICATE_PUBLIC_BASE_URL',
    f'https://{CERTIFICATE_BUCKET}.s3.{AWS_REGION}.amazonaws.com',
)
CERTIFICATE_FOLDER = 'donation_certificates'
CERTIFICATE_TMP_DIR = os.environ.get('CERTIFICATE_TMP_DIR') or None
# TrueType font for names outside Latin-1, e.g. NotoSansDevanagari-Regular.ttf
CERTIFICATE_FONT_PATH = os.environ.get('CERTIFICATE_FONT_PATH') or None
CERTIFICATE_BOLD_FONT_PATH = os.environ.get('CERTIFICATE_BOLD_FONT_PATH') or None

# ========================================
# CELERY
# ========================================
CELERY_BROKER_URL = os.environ.get('CELERY_BROKER_URL', 'redis://localhost:6379/0')
CELERY_RESULT_BACKEND = os.environ.get('CELERY_RESULT_BACKEND', CELERY_BROKER_URL)
CELERY_TIMEZONE = 'UTC'
CELERY_BEAT_SCHEDULE = {
    'expire-blood-units': {
        'task': 'donations.tasks.expire_blood_units',
        'schedule': timedelta(hours=1),
    },
    'retry-missing-certificates': {
        'task': 'donations.tasks.retry_missing_certificates',
        'schedule': timedelta(minutes=15),
    },
}

# ========================================
# I18N / STATIC
# ========================================
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# ========================================
# LOGGING
# ========================================
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        app: {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False}
        for app in ('accounts', 'donors', 'patients', 'bloodbanks', 'donations', 'api', 'bloodbank_backend')
    },
}
