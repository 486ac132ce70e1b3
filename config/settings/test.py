"""Test settings: file-backed SQLite, fast hashing, inline Celery."""

from .base import *  # noqa: F401,F403

# A file database (not :memory:) so threads in concurrency tests get their own
# connections and wait on the IMMEDIATE write lock.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.test.sqlite3',
        'OPTIONS': SQLITE_OPTIONS,
        'TEST': {'NAME': BASE_DIR / 'test_db.sqlite3'},
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

BOOKING_CURRENCY = 'USD'
BOOKING_EDIT_GRACE_DAYS = 1
