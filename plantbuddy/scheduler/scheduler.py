"""
In-process care scheduler.

Two independent jobs on their own cron cadence:
1. Reminders (REMINDER_CHECK_CRON) - fire due reminders
2. Weather (WEATHER_CHECK_CRON) - weather risk pass over active plants,
   plus one run right after start-up

Created once in the API lifespan and shut down with it. Deployments that run
Celery beat instead set SCHEDULER_ENABLED=false.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger

from plantbuddy.core.config import Settings, get_settings
from plantbuddy.reminders.rescheduler import process_due_reminders
from plantbuddy.scheduler.reports import BatchReport
from plantbuddy.scheduler.runner import JobRunner
from plantbuddy.weather.evaluator import check_weather_risks

logger = logging.getLogger(__name__)

REMINDER_JOB_ID = "reminders"
WEATHER_JOB_ID = "weather"
WEATHER_COLD_START_JOB_ID = "weather_cold_start"


class CareScheduler:
    """Owns the reminder and weather jobs."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        reminder_job: Optional[Callable[[], Awaitable[BatchReport]]] = None,
        weather_job: Optional[Callable[[], Awaitable[BatchReport]]] = None,
    ):
        self.settings = settings or get_settings()
        self.reminders = JobRunner(REMINDER_JOB_ID, reminder_job or process_due_reminders)
        self.weather = JobRunner(WEATHER_JOB_ID, weather_job or check_weather_risks)
        self.scheduler = AsyncIOScheduler(timezone="UTC")

    @property
    def started(self) -> bool:
        return self.scheduler.running

    def start(self) -> None:
        """Register both jobs and start ticking. Needs a running event loop."""
        self.scheduler.add_job(
            self.reminders.run,
            CronTrigger.from_crontab(self.settings.REMINDER_CHECK_CRON, timezone="UTC"),
            id=REMINDER_JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self.scheduler.add_job(
            self.weather.run,
            CronTrigger.from_crontab(self.settings.WEATHER_CHECK_CRON, timezone="UTC"),
            id=WEATHER_JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        if self.settings.WEATHER_RUN_ON_START:
            self.scheduler.add_job(
                self.weather.run,
                DateTrigger(),
                id=WEATHER_COLD_START_JOB_ID,
                replace_existing=True,
            )
        self.scheduler.start()
        logger.info(
            f"Care scheduler started (reminders: '{self.settings.REMINDER_CHECK_CRON}', "
            f"weather: '{self.settings.WEATHER_CHECK_CRON}')"
        )

    def shutdown(self) -> None:
        """Stop scheduling; in-flight runs are not waited for."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Care scheduler stopped")

    def status(self) -> dict:
        jobs = {}
        for runner in (self.reminders, self.weather):
            job = self.scheduler.get_job(runner.name)
            jobs[runner.name] = dict(
                runner.status(),
                next_run_time=job.next_run_time if job else None,
            )
        return {"running": self.started, "jobs": jobs}
