"""
Reminder delivery.

The rescheduler hands every fired reminder to a NotificationDispatcher.
LogDispatcher is the default transport; web push or SMS plug in by
implementing the same `send` coroutine.
"""

from __future__ import annotations

import logging
from typing import Protocol

from plantbuddy.notifications.models import ReminderNotification

logger = logging.getLogger(__name__)


class NotificationDispatcher(Protocol):
    async def send(self, notification: ReminderNotification) -> None:
        ...


class LogDispatcher:
    """Writes the notification to the application log."""

    async def send(self, notification: ReminderNotification) -> None:
        logger.info(
            f"[Reminder] {notification.plant_name} - {notification.kind} - "
            f"note:{notification.note or ''}"
        )
