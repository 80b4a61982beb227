"""
Django settings for the shop backend.

All deployment-specific values come from environment variables, parsed once
at startup by config.environment. Missing required values are a startup error.
"""
from pathlib import Path

from .environment import load_environment

BASE_DIR = Path(__file__).resolve().parent.parent

ENV = load_environment()

# =============================================================================
# Core
# =============================================================================

JWT_KEY = ENV.jwt_key
JWT_ALGORITHM = 'HS256'
JWT_EXPIRATION_SECONDS = ENV.jwt_expiration_seconds

SECRET_KEY = ENV.django_secret_key or JWT_KEY
DEBUG = ENV.django_debug
ALLOWED_HOSTS = ENV.allowed_hosts

# Listen port used by `manage.py runserver` when no address is given
PORT = ENV.port

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'rest_framework',
    'core',
    'catalog',
    'accounts',
    'orders',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

# Routes are declared without trailing slashes
APPEND_SLASH = False

ROOT_URLCONF = 'config.urls'
WSGI_APPLICATION = 'config.wsgi.application'

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

# =============================================================================
# Database
# =============================================================================

DB_TIMEOUT_SECONDS = ENV.db_timeout_seconds

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'HOST': ENV.db_host,
        'PORT': ENV.db_port,
        'USER': ENV.db_username,
        'PASSWORD': ENV.db_password,
        'NAME': ENV.db_database,
        'CONN_MAX_AGE': ENV.db_conn_max_age,
        'OPTIONS': {
            'connect_timeout': DB_TIMEOUT_SECONDS,
            'options': (
                f'-c statement_timeout={DB_TIMEOUT_SECONDS * 1000} '
                f'-c lock_timeout={DB_TIMEOUT_SECONDS * 1000}'
            ),
        },
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.BCryptSHA256PasswordHasher',
    'django.contrib.auth.hashers.PBKDF2PasswordHasher',
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'

# =============================================================================
# REST framework
# =============================================================================

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
        'rest_framework.parsers.FormParser',
        'rest_framework.parsers.MultiPartParser',
    ],
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'EXCEPTION_HANDLER': 'core.exceptions.api_exception_handler',
    'UNAUTHENTICATED_USER': None,
}

# =============================================================================
# Rate limiting
# =============================================================================

REDIS_URL = ENV.redis_url
RATE_LIMIT_ENABLED = ENV.rate_limit_enabled

# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL = ENV.log_level.upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '%(asctime)s %(levelname)s %(name)s %(message)s',
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
        'django': {'handlers': ['console'], 'level': 'INFO', 'propagate': False},
        'core': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'catalog': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'accounts': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'orders': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
    },
}
