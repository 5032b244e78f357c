"""
Reminder rescheduler.

Runs on every reminder tick:
1. Re-read the due set (next_at <= now)
2. Notify for each due reminder
3. Recurring reminders move forward by repeat_days from their previous
   next_at (stable cadence even when the tick ran late); one-off reminders
   are deleted

Each reminder is processed on its own; a failure is recorded in the batch
report and the remaining reminders still run. A reminder that failed is still
due, so the next tick picks it up again.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from plantbuddy.notifications.delivery import LogDispatcher, NotificationDispatcher
from plantbuddy.notifications.models import ReminderNotification
from plantbuddy.plants.service import PlantService
from plantbuddy.reminders.service import ReminderService
from plantbuddy.scheduler.reports import BatchReport

logger = logging.getLogger(__name__)

UNKNOWN_PLANT_NAME = "Unknown"


def next_fire_time(previous_next_at: datetime, repeat_days: int) -> datetime:
    """Anchor-preserving advance: previous next_at + repeat_days days."""
    return previous_next_at + timedelta(days=repeat_days)


async def _resolve_plant_name(plant_id: Optional[str]) -> str:
    """Best-effort plant lookup; never fails the reminder."""
    try:
        plant = await PlantService.find_plant(plant_id)
    except Exception as e:
        logger.warning(f"Plant lookup failed for {plant_id}: {e}")
        return UNKNOWN_PLANT_NAME
    if not plant:
        return UNKNOWN_PLANT_NAME
    return plant.get("name") or UNKNOWN_PLANT_NAME


async def fire_reminder(reminder: dict, dispatcher: NotificationDispatcher) -> str:
    """
    Deliver one due reminder and advance or retire it.

    Returns the action taken: "advanced", "deleted", or "skipped" when the
    record changed underneath us (another run already handled it).
    """
    reminder_id = reminder["_id"]
    plant_id = reminder.get("plant_id")
    previous_next_at = reminder["next_at"]
    repeat_days = int(reminder.get("repeat_days") or 0)

    plant_name = await _resolve_plant_name(plant_id)
    await dispatcher.send(ReminderNotification(
        plant_name=plant_name,
        kind=reminder.get("kind") or "water",
        note=reminder.get("note"),
        reminder_id=str(reminder_id),
        plant_id=str(plant_id) if plant_id else None,
    ))

    if repeat_days > 0:
        updated = await ReminderService.advance_reminder(
            reminder_id,
            next_fire_time(previous_next_at, repeat_days),
            expected_next_at=previous_next_at,
        )
        return "advanced" if updated else "skipped"

    deleted = await ReminderService.delete_reminder(reminder_id, expected_next_at=previous_next_at)
    return "deleted" if deleted else "skipped"


async def process_due_reminders(
    now: Optional[datetime] = None,
    dispatcher: Optional[NotificationDispatcher] = None,
) -> BatchReport:
    """
    Process every reminder that is due at `now`.

    Args:
        now: Evaluation time (naive UTC). Defaults to the current time.
        dispatcher: Delivery transport. Defaults to logging.

    Returns:
        BatchReport with one ItemResult per due reminder.
    """
    now = now or datetime.utcnow()
    dispatcher = dispatcher or LogDispatcher()
    report = BatchReport(job="reminders")

    due = await ReminderService.find_due_reminders(now)
    if not due:
        return report.finish()

    logger.info(f"Reminder tick: {len(due)} reminders due")

    for reminder in due:
        reminder_id = str(reminder.get("_id"))
        try:
            action = await fire_reminder(reminder, dispatcher)
            report.record(reminder_id, action)
        except Exception as e:
            logger.error(f"Failed to process reminder {reminder_id}: {e}")
            report.record_failure(reminder_id, e)

    report.finish()
    logger.info(f"Reminder tick complete: {report.summary()}")
    return report
