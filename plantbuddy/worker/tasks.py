"""Celery tasks (sync wrappers around the async jobs)."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict

from celery.signals import beat_init, setup_logging

from plantbuddy.core.config import get_settings
from plantbuddy.core.logging_config import configure_logging
from plantbuddy.scheduler.reports import BatchReport
from plantbuddy.worker.celery_app import celery_app

logger = logging.getLogger(__name__)


@setup_logging.connect
def _setup_logging(**kwargs):
    configure_logging(get_settings().LOG_LEVEL)


def _run_async(coro):
    """Run async function in sync Celery task."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


async def _run_locked(job_name: str, job: Callable[[], Awaitable[BatchReport]]) -> Dict[str, Any]:
    """
    Connect, take the job lock, run the job, release.
    
    The lease is renewed in the background while the job runs, so a long
    run keeps the lock however long it takes. If another worker still holds
    the lock the run is skipped; the due set is recomputed on the next tick
    anyway.
    """
    from plantbuddy.core.database import Database
    from plantbuddy.scheduler.locks import JobLock
    
    await Database.connect()
    lock = JobLock(job_name)
    try:
        if not await lock.acquire():
            logger.warning(f"Skipping {job_name}: previous run still holds the lock")
            return {"job": job_name, "skipped": True}
        heartbeat = asyncio.ensure_future(lock.keep_alive())
        try:
            report = await job()
        finally:
            heartbeat.cancel()
            await asyncio.gather(heartbeat, return_exceptions=True)
            await lock.release()
        return report.summary()
    finally:
        await Database.disconnect()


@celery_app.task(name="plantbuddy.worker.tasks.process_due_reminders", acks_late=True)
def process_due_reminders() -> Dict[str, Any]:
    """
    Fire every due reminder.
    
    Scheduled by Celery Beat on REMINDER_CHECK_CRON.
    
    Returns:
        Batch report summary.
    """
    from plantbuddy.reminders.rescheduler import process_due_reminders as run_reminders
    
    try:
        return _run_async(_run_locked("reminders", run_reminders))
    except Exception as e:
        logger.error(f"Reminder task failed: {e}")
        raise


@celery_app.task(name="plantbuddy.worker.tasks.check_weather_risks", acks_late=True)
def check_weather_risks() -> Dict[str, Any]:
    """
    Weather risk pass over all active plants.
    
    Scheduled by Celery Beat on WEATHER_CHECK_CRON and queued once when
    beat starts.
    
    Returns:
        Batch report summary.
    """
    from plantbuddy.weather.evaluator import check_weather_risks as run_weather
    
    try:
        return _run_async(_run_locked("weather", run_weather))
    except Exception as e:
        logger.error(f"Weather task failed: {e}")
        raise


@beat_init.connect
def _queue_weather_cold_start(sender=None, **kwargs):
    """Run the weather pass once when beat starts, independent of the cron."""
    if get_settings().WEATHER_RUN_ON_START:
        check_weather_risks.delay()
