"""Development settings for the booking service.

Debug on, every host allowed, tasks executed inline so no broker is needed.
Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

DEBUG = True

ALLOWED_HOSTS = ['*']

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
