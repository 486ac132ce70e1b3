import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("car_rental")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Release vehicles stuck in "rented" and count overdue returns - hourly
    "sync-vehicle-availability": {
        "task": "bookings.sync_vehicle_availability",
        "schedule": crontab(minute=5),
        "options": {"expires": 3000},
    },
}
