"""Plants API routes."""

from typing import List
from fastapi import APIRouter, status

from plantbuddy.plants.models import PlantCreate, PlantUpdate, PlantResponse
from plantbuddy.plants.service import PlantService

router = APIRouter(prefix="/plants", tags=["Plants"])


@router.post("", response_model=PlantResponse, status_code=status.HTTP_201_CREATED)
async def create_plant(plant_data: PlantCreate):
    """
    Register a plant.
    
    Give it a `location` ({lat, lon} or {city}) to get weather alerts for
    where it actually lives; otherwise the default location is used.
    """
    return await PlantService.create_plant(plant_data)


@router.get("", response_model=List[PlantResponse])
async def list_plants():
    """List plants, newest first."""
    return await PlantService.list_plants()


@router.get("/{plant_id}", response_model=PlantResponse)
async def get_plant(plant_id: str):
    return await PlantService.get_plant(plant_id)


@router.patch("/{plant_id}", response_model=PlantResponse)
async def update_plant(plant_id: str, update: PlantUpdate):
    """Update a plant. Setting status to harvested/dead stops weather checks."""
    return await PlantService.update_plant(plant_id, update)


@router.delete("/{plant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_plant(plant_id: str):
    """Move a plant to the trash (soft delete)."""
    await PlantService.delete_plant(plant_id)
