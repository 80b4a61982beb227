"""
Settings for the test suite: SQLite, fast hashing, no Redis.
"""
import os

os.environ.setdefault('JWT_KEY', 'test-signing-key-0123456789abcdef0123456789abcdef')
os.environ.setdefault('PORT', '8000')
os.environ.setdefault('DB_HOST', 'localhost')
os.environ.setdefault('DB_USERNAME', 'shop')
os.environ.setdefault('DB_PASSWORD', 'shop')
os.environ.setdefault('DB_DATABASE', 'shop')

from .settings import *  # noqa: E402,F401,F403

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

RATE_LIMIT_ENABLED = False
