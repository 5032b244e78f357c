"""Delivery notification payloads."""

from typing import Optional
from pydantic import BaseModel


class ReminderNotification(BaseModel):
    """What a fired reminder tells the user."""
    plant_name: str
    kind: str
    note: Optional[str] = None
    reminder_id: Optional[str] = None
    plant_id: Optional[str] = None
