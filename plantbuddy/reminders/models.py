"""Reminder models and schemas."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class ReminderKind(str, Enum):
    """What the reminder is about."""
    WATER = "water"
    NUTRIENT = "nutrient"
    CUSTOM = "custom"


class ReminderCreate(BaseModel):
    """Schema for creating a reminder."""
    plant_id: str
    kind: ReminderKind = ReminderKind.WATER
    note: Optional[str] = None
    next_at: datetime
    repeat_days: int = Field(default=0, ge=0, description="0 = one-off, >0 = repeat every N days")


class ReminderResponse(BaseModel):
    """Response schema for a reminder."""
    id: str
    plant_id: str
    kind: ReminderKind
    note: Optional[str] = None
    next_at: datetime
    repeat_days: int = 0
    created_at: Optional[datetime] = None
