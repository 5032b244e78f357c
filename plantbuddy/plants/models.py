"""Plant-related models and schemas."""

from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, model_validator


class PlantStatus(str, Enum):
    """Lifecycle status of a plant. Only active plants get weather checks."""
    ACTIVE = "active"
    HARVESTED = "harvested"
    DEAD = "dead"


class PlantLocation(BaseModel):
    """Where the plant lives, for weather lookups: coordinates or a city name."""
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lon: Optional[float] = Field(None, ge=-180, le=180)
    city: Optional[str] = None

    @model_validator(mode="after")
    def _coordinates_come_in_pairs(self):
        if (self.lat is None) != (self.lon is None):
            raise ValueError("lat and lon must be given together")
        return self


class PlantCreate(BaseModel):
    """Schema to register a plant."""
    name: str = Field(..., min_length=1)
    species: Optional[str] = None
    planted_at: Optional[datetime] = None
    expected_growth_days: Optional[int] = Field(None, gt=0)
    location: Optional[PlantLocation] = None


class PlantUpdate(BaseModel):
    """Schema to update a plant."""
    name: Optional[str] = Field(None, min_length=1)
    species: Optional[str] = None
    status: Optional[PlantStatus] = None
    location: Optional[PlantLocation] = None


class PlantResponse(BaseModel):
    """Response schema for a plant."""
    id: str
    name: str
    species: Optional[str] = None
    status: PlantStatus = PlantStatus.ACTIVE
    planted_at: Optional[datetime] = None
    expected_growth_days: Optional[int] = None
    predicted_harvest_date: Optional[datetime] = None
    growth_stage: str = "seedling"
    meta: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
