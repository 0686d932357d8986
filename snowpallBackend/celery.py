"""
Celery Configuration for SnowPall Backend

Runs the request ledger's repair sweeps on a schedule.
"""

import os

from celery import Celery


# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "snowpallBackend.settings")

app = Celery("snowpallBackend")

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

app.conf.beat_schedule = {
    "recover-request-migrations": {
        "task": "jobs.tasks.recover_request_migrations_task",
        "schedule": 5.0 * 60.0,  # Every 5 minutes
        "options": {"expires": 4.0 * 60.0, "queue": "ledger_tasks"},
    },
    "retry-failed-payouts": {
        "task": "jobs.tasks.retry_failed_payouts_task",
        "schedule": 15.0 * 60.0,  # Every 15 minutes
        "options": {"expires": 10.0 * 60.0, "queue": "ledger_tasks"},
    },
}

app.conf.update(
    task_routes={
        "jobs.tasks.*": {"queue": "ledger_tasks"},
    },
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    result_expires=60 * 60 * 24,  # 24 hours
    worker_max_tasks_per_child=1000,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=10 * 60,
    task_soft_time_limit=8 * 60,
    beat_scheduler="django_celery_beat.schedulers:DatabaseScheduler",
)
