"""Weather API routes."""

from typing import Optional
from fastapi import APIRouter, Query

from plantbuddy.weather.evaluator import evaluate_plant_now
from plantbuddy.weather.models import PlantRiskResponse, WeatherLocation, WeatherSnapshot
from plantbuddy.weather.service import get_weather_service

router = APIRouter(prefix="/weather", tags=["Weather"])


@router.get("/current", response_model=WeatherSnapshot)
async def get_current_weather(city: Optional[str] = Query(default=None)):
    """
    Current weather for a city (or DEFAULT_LOCATION when omitted).
    """
    service = get_weather_service()
    return await service.fetch_weather(WeatherLocation(city=city) if city else None)


@router.get("/plants/{plant_id}/risk", response_model=PlantRiskResponse)
async def get_plant_risk(plant_id: str):
    """
    Run the weather risk rules for one plant right now.
    
    Preview only: no alert is stored, whatever the level.
    """
    return await evaluate_plant_now(plant_id)
