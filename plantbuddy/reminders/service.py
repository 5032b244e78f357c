"""Reminder service - CRUD plus the due-set and reschedule operations."""

from datetime import datetime
from typing import Optional, List
from bson import ObjectId

from plantbuddy.core.database import Database
from plantbuddy.core.datetimes import as_naive_utc
from plantbuddy.core.exceptions import NotFoundException, BadRequestException
from plantbuddy.reminders.models import ReminderCreate, ReminderResponse


class ReminderService:
    """Handles reminder-related database operations."""
    
    @staticmethod
    def _get_collection():
        return Database.get_collection("reminders")
    
    @staticmethod
    def _validate_object_id(id_str: str) -> ObjectId:
        """Validate and convert string to ObjectId."""
        if not ObjectId.is_valid(id_str):
            raise BadRequestException("Invalid reminder ID")
        return ObjectId(id_str)
    
    # ==================== CRUD Operations ====================
    
    @classmethod
    async def create_reminder(cls, data: ReminderCreate) -> ReminderResponse:
        """Create a new reminder."""
        doc = {
            "plant_id": data.plant_id,
            "kind": data.kind.value,
            "note": data.note,
            "next_at": as_naive_utc(data.next_at),
            "repeat_days": data.repeat_days,
            "created_at": datetime.utcnow(),
        }
        
        result = await cls._get_collection().insert_one(doc)
        doc["_id"] = result.inserted_id
        
        return cls._doc_to_response(doc)
    
    @classmethod
    async def list_reminders(cls, plant_id: Optional[str] = None) -> List[ReminderResponse]:
        """Upcoming reminders, soonest first."""
        query = {}
        if plant_id:
            query["plant_id"] = plant_id
        cursor = cls._get_collection().find(query).sort("next_at", 1)
        return [cls._doc_to_response(doc) async for doc in cursor]
    
    @classmethod
    async def delete_reminder_by_id(cls, reminder_id: str) -> bool:
        """Delete a reminder on user request."""
        object_id = cls._validate_object_id(reminder_id)
        deleted = await cls.delete_reminder(object_id)
        if not deleted:
            raise NotFoundException("Reminder not found")
        return True
    
    # ==================== Scheduler Operations ====================
    
    @classmethod
    async def find_due_reminders(cls, now: Optional[datetime] = None) -> List[dict]:
        """
        Every reminder whose next_at has passed.
        
        Always a fresh read, so a reminder advanced or deleted by an earlier
        (possibly partial) run is never picked up again.
        """
        now = as_naive_utc(now or datetime.utcnow())
        cursor = cls._get_collection().find({"next_at": {"$lte": now}})
        return await cursor.to_list(length=None)
    
    @classmethod
    async def advance_reminder(
        cls,
        reminder_id: ObjectId,
        new_next_at: datetime,
        expected_next_at: Optional[datetime] = None,
    ) -> bool:
        """
        Move a reminder's next_at forward.
        
        With expected_next_at the write only applies if the record still has
        that value, so two overlapping runs cannot both advance it.
        Returns False when nothing was updated.
        """
        query = {"_id": reminder_id}
        if expected_next_at is not None:
            query["next_at"] = as_naive_utc(expected_next_at)
        result = await cls._get_collection().update_one(
            query,
            {"$set": {"next_at": as_naive_utc(new_next_at)}},
        )
        return result.modified_count > 0
    
    @classmethod
    async def delete_reminder(
        cls,
        reminder_id: ObjectId,
        expected_next_at: Optional[datetime] = None,
    ) -> bool:
        """Delete a reminder (optionally only if next_at is unchanged)."""
        query = {"_id": reminder_id}
        if expected_next_at is not None:
            query["next_at"] = as_naive_utc(expected_next_at)
        result = await cls._get_collection().delete_one(query)
        return result.deleted_count > 0
    
    # ==================== Helpers ====================
    
    @staticmethod
    def _doc_to_response(doc: dict) -> ReminderResponse:
        """Convert MongoDB document to ReminderResponse."""
        return ReminderResponse(
            id=str(doc["_id"]),
            plant_id=doc["plant_id"],
            kind=doc.get("kind", "water"),
            note=doc.get("note"),
            next_at=doc["next_at"],
            repeat_days=doc.get("repeat_days") or 0,
            created_at=doc.get("created_at"),
        )
