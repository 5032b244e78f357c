"""Plant service - handles plant CRUD and the lookups the background jobs need."""

from datetime import datetime, timedelta
from typing import Optional, List
from bson import ObjectId
from pymongo import ReturnDocument

from plantbuddy.core.database import Database
from plantbuddy.core.datetimes import as_naive_utc
from plantbuddy.core.exceptions import NotFoundException, BadRequestException
from plantbuddy.plants.models import (
    PlantCreate,
    PlantUpdate,
    PlantResponse,
    PlantStatus,
)


def growth_stage_for(planted_at: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Derive a coarse growth stage from days since planting."""
    if not planted_at:
        return "unknown"
    days = ((as_naive_utc(now) or datetime.utcnow()) - as_naive_utc(planted_at)).days
    if days < 10:
        return "seedling"
    if days < 40:
        return "young"
    if days < 80:
        return "growing"
    return "mature"


class PlantService:
    """Handles plant-related database operations."""
    
    @staticmethod
    def _get_plants_collection():
        return Database.get_collection("plants")
    
    @staticmethod
    def _validate_object_id(id_str: str) -> ObjectId:
        """Validate and convert string to ObjectId."""
        if not ObjectId.is_valid(id_str):
            raise BadRequestException("Invalid plant ID")
        return ObjectId(id_str)
    
    # ==================== CRUD ====================
    
    @classmethod
    async def create_plant(cls, plant_data: PlantCreate) -> PlantResponse:
        """Register a new plant."""
        collection = cls._get_plants_collection()
        now = datetime.utcnow()
        planted_at = as_naive_utc(plant_data.planted_at) or now
        
        plant_doc = {
            "name": plant_data.name.strip(),
            "species": plant_data.species,
            "status": PlantStatus.ACTIVE.value,
            "planted_at": planted_at,
            "expected_growth_days": plant_data.expected_growth_days,
            "predicted_harvest_date": None,
            "growth_stage": growth_stage_for(planted_at, now),
            "meta": {},
            "created_at": now,
            "deleted_at": None,
        }
        if plant_data.expected_growth_days:
            plant_doc["predicted_harvest_date"] = now + timedelta(days=plant_data.expected_growth_days)
        if plant_data.location:
            plant_doc["meta"]["location"] = plant_data.location.model_dump(exclude_none=True)
        
        result = await collection.insert_one(plant_doc)
        plant_doc["_id"] = result.inserted_id
        
        return cls._doc_to_response(plant_doc)
    
    @classmethod
    async def list_plants(cls) -> List[PlantResponse]:
        """All plants that are not soft-deleted, newest first."""
        cursor = cls._get_plants_collection().find({"deleted_at": None}).sort("created_at", -1)
        return [cls._doc_to_response(doc) async for doc in cursor]
    
    @classmethod
    async def get_plant(cls, plant_id: str) -> PlantResponse:
        """Get a single plant or raise 404."""
        cls._validate_object_id(plant_id)
        plant = await cls.find_plant(plant_id)
        if not plant:
            raise NotFoundException("Plant not found")
        return cls._doc_to_response(plant)
    
    @classmethod
    async def update_plant(cls, plant_id: str, update: PlantUpdate) -> PlantResponse:
        """Update name, species, status or weather location."""
        object_id = cls._validate_object_id(plant_id)
        changes = {}
        if update.name is not None:
            changes["name"] = update.name.strip()
        if update.species is not None:
            changes["species"] = update.species
        if update.status is not None:
            changes["status"] = update.status.value
        if update.location is not None:
            changes["meta.location"] = update.location.model_dump(exclude_none=True)
        
        if not changes:
            return await cls.get_plant(plant_id)
        
        result = await cls._get_plants_collection().find_one_and_update(
            {"_id": object_id, "deleted_at": None},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if not result:
            raise NotFoundException("Plant not found")
        return cls._doc_to_response(result)
    
    @classmethod
    async def delete_plant(cls, plant_id: str) -> bool:
        """Soft delete: the plant drops out of listings and weather checks."""
        object_id = cls._validate_object_id(plant_id)
        result = await cls._get_plants_collection().update_one(
            {"_id": object_id, "deleted_at": None},
            {"$set": {"deleted_at": datetime.utcnow()}},
        )
        if result.matched_count == 0:
            raise NotFoundException("Plant not found")
        return True
    
    # ==================== Job lookups ====================
    
    @classmethod
    async def find_plant(cls, plant_id: str) -> Optional[dict]:
        """Raw plant document, or None if the id is malformed or unknown."""
        if not plant_id or not ObjectId.is_valid(str(plant_id)):
            return None
        return await cls._get_plants_collection().find_one(
            {"_id": ObjectId(str(plant_id)), "deleted_at": None}
        )
    
    @classmethod
    async def find_active_plants(cls) -> List[dict]:
        """Raw documents of every active, non-deleted plant."""
        cursor = cls._get_plants_collection().find(
            {"status": PlantStatus.ACTIVE.value, "deleted_at": None}
        )
        return await cursor.to_list(length=None)
    
    # ==================== Helpers ====================
    
    @staticmethod
    def _doc_to_response(doc: dict) -> PlantResponse:
        """Convert MongoDB document to PlantResponse."""
        return PlantResponse(
            id=str(doc["_id"]),
            name=doc["name"],
            species=doc.get("species"),
            status=doc.get("status", PlantStatus.ACTIVE.value),
            planted_at=doc.get("planted_at"),
            expected_growth_days=doc.get("expected_growth_days"),
            predicted_harvest_date=doc.get("predicted_harvest_date"),
            growth_stage=growth_stage_for(doc.get("planted_at")),
            meta=doc.get("meta") or {},
            created_at=doc["created_at"],
        )
