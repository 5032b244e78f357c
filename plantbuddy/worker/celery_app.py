"""Celery app bootstrap and beat schedule for the reminder and weather jobs."""

from __future__ import annotations

from celery import Celery
from celery.schedules import crontab

from plantbuddy.core.config import get_settings


settings = get_settings()

DEFAULT_QUEUE = "default"


def crontab_from_expression(expression: str) -> crontab:
    """Build a Celery crontab from a standard 5-field cron expression."""
    fields = expression.split()
    if len(fields) != 5:
        raise ValueError(f"Expected 5 cron fields, got {len(fields)}: '{expression}'")
    minute, hour, day_of_month, month_of_year, day_of_week = fields
    return crontab(
        minute=minute,
        hour=hour,
        day_of_month=day_of_month,
        month_of_year=month_of_year,
        day_of_week=day_of_week,
    )


celery_app = Celery(
    "plantbuddy",
    broker=(settings.CELERY_BROKER_URL or "").strip(),
    include=["plantbuddy.worker.tasks"],
)

celery_app.conf.update(
    task_default_queue=DEFAULT_QUEUE,
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_reject_on_worker_lost=True,
)

if settings.CELERY_TASK_TIME_LIMIT:
    celery_app.conf.task_time_limit = int(settings.CELERY_TASK_TIME_LIMIT)
if settings.CELERY_TASK_SOFT_TIME_LIMIT:
    celery_app.conf.task_soft_time_limit = int(settings.CELERY_TASK_SOFT_TIME_LIMIT)


# =============================================================================
# Celery Beat Schedule - Periodic Tasks
# =============================================================================

celery_app.conf.beat_schedule = {
    "process-due-reminders": {
        "task": "plantbuddy.worker.tasks.process_due_reminders",
        "schedule": crontab_from_expression(settings.REMINDER_CHECK_CRON),
        "options": {"queue": DEFAULT_QUEUE},
    },
    "check-weather-risks": {
        "task": "plantbuddy.worker.tasks.check_weather_risks",
        "schedule": crontab_from_expression(settings.WEATHER_CHECK_CRON),
        "options": {"queue": DEFAULT_QUEUE},
    },
}
