"""Weather-related models and schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from plantbuddy.alerts.models import AlertLevel


class WeatherLocation(BaseModel):
    """Resolved lookup target: coordinates or a free-form city query."""
    lat: Optional[float] = None
    lon: Optional[float] = None
    city: Optional[str] = None

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lon is not None

    def describe(self) -> str:
        if self.has_coordinates:
            return f"{self.lat},{self.lon}"
        return self.city or ""


class WeatherSnapshot(BaseModel):
    """Current conditions, normalized from one provider response."""
    temp_c: Optional[float] = None
    humidity: Optional[float] = None
    wind_ms: Optional[float] = None
    rain_mm: float = 0.0  # Rain volume in last 1 hour (mm)
    description: str = ""
    raw: Dict[str, Any] = Field(default_factory=dict)
    fetched_at: datetime = Field(default_factory=datetime.utcnow)


class RiskEvaluation(BaseModel):
    """Result of running the risk rules against one snapshot for one plant."""
    title: str
    message: str
    issues: List[str] = Field(default_factory=list)
    level: AlertLevel = AlertLevel.INFO
    meta: WeatherSnapshot


class PlantRiskResponse(BaseModel):
    """Response schema for an on-demand plant risk check."""
    plant_id: str
    location: WeatherLocation
    evaluation: RiskEvaluation
