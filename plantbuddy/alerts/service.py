"""Alert service - handles alert persistence and queries."""

from datetime import datetime
from typing import Any, Dict, Optional, List
from bson import ObjectId
from pymongo import ReturnDocument

from plantbuddy.core.database import Database
from plantbuddy.core.exceptions import NotFoundException, BadRequestException
from plantbuddy.alerts.models import AlertLevel, AlertResponse


class AlertService:
    """Handles alert-related database operations."""
    
    @staticmethod
    def _get_collection():
        return Database.get_collection("alerts")
    
    @staticmethod
    def _validate_object_id(id_str: str) -> ObjectId:
        """Validate and convert string to ObjectId."""
        if not ObjectId.is_valid(id_str):
            raise BadRequestException("Invalid alert ID")
        return ObjectId(id_str)
    
    @classmethod
    async def create_alert(
        cls,
        plant_id: Optional[str],
        title: str,
        message: str,
        level: AlertLevel,
        meta: Optional[Dict[str, Any]] = None,
    ) -> dict:
        """Persist a new (unread) alert and return the stored document."""
        doc = {
            "plant_id": plant_id,
            "title": title,
            "message": message,
            "level": AlertLevel(level).value,
            "meta": meta or {},
            "created_at": datetime.utcnow(),
            "read": False,
        }
        result = await cls._get_collection().insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc
    
    @classmethod
    async def find_recent_duplicate(
        cls,
        plant_id: Optional[str],
        level: AlertLevel,
        message: str,
        since: datetime,
    ) -> Optional[dict]:
        """An unread alert with the same plant, level and message created after `since`."""
        return await cls._get_collection().find_one({
            "plant_id": plant_id,
            "level": AlertLevel(level).value,
            "message": message,
            "read": False,
            "created_at": {"$gte": since},
        })
    
    @classmethod
    async def list_alerts(
        cls,
        plant_id: Optional[str] = None,
        unread_only: bool = False,
        limit: int = 200,
    ) -> tuple[List[AlertResponse], int]:
        """
        Alerts, newest first.
        Returns: (alerts, unread_count)
        """
        collection = cls._get_collection()
        
        query = {}
        if plant_id:
            query["plant_id"] = plant_id
        unread_query = dict(query, read=False)
        if unread_only:
            query = unread_query
        
        unread_count = await collection.count_documents(unread_query)
        cursor = collection.find(query).sort("created_at", -1).limit(limit)
        alerts = [cls._doc_to_response(doc) async for doc in cursor]
        
        return alerts, unread_count
    
    @classmethod
    async def mark_as_read(cls, alert_id: str) -> AlertResponse:
        """Mark an alert as read."""
        object_id = cls._validate_object_id(alert_id)
        
        result = await cls._get_collection().find_one_and_update(
            {"_id": object_id},
            {"$set": {"read": True}},
            return_document=ReturnDocument.AFTER,
        )
        
        if not result:
            raise NotFoundException("Alert not found")
        
        return cls._doc_to_response(result)
    
    # ==================== Helpers ====================
    
    @staticmethod
    def _doc_to_response(doc: dict) -> AlertResponse:
        """Convert MongoDB document to AlertResponse."""
        return AlertResponse(
            id=str(doc["_id"]),
            plant_id=doc.get("plant_id"),
            title=doc["title"],
            message=doc.get("message"),
            level=doc.get("level", AlertLevel.INFO.value),
            meta=doc.get("meta") or {},
            created_at=doc["created_at"],
            read=doc.get("read", False),
        )
