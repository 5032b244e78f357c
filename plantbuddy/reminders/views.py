"""Reminders API routes."""

from typing import List, Optional
from fastapi import APIRouter, Query, status

from plantbuddy.reminders.models import ReminderCreate, ReminderResponse
from plantbuddy.reminders.service import ReminderService

router = APIRouter(prefix="/reminders", tags=["Reminders"])


@router.post("", response_model=ReminderResponse, status_code=status.HTTP_201_CREATED)
async def create_reminder(data: ReminderCreate):
    """
    Schedule a care reminder.
    
    `repeat_days = 0` fires once; anything above repeats on that cadence,
    anchored to `next_at`.
    """
    return await ReminderService.create_reminder(data)


@router.get("", response_model=List[ReminderResponse])
async def list_reminders(plant_id: Optional[str] = Query(default=None)):
    """List upcoming reminders, soonest first."""
    return await ReminderService.list_reminders(plant_id=plant_id)


@router.delete("/{reminder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reminder(reminder_id: str):
    await ReminderService.delete_reminder_by_id(reminder_id)
