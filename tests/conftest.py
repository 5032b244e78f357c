"""
Pytest configuration and fixtures.

The database fixture swaps the Motor client for an in-memory mongomock one,
so services run their real queries without a MongoDB server.
"""

from datetime import datetime
from typing import Dict, List, Optional

import pytest
from mongomock_motor import AsyncMongoMockClient

from plantbuddy.core.database import Database
from plantbuddy.weather.models import WeatherLocation, WeatherSnapshot
from plantbuddy.weather.service import WeatherService


# Whole milliseconds only: BSON datetimes drop microseconds.
NOW = datetime(2026, 10, 18, 9, 30)


@pytest.fixture
def db():
    """In-memory database wired into Database for the duration of a test."""
    client = AsyncMongoMockClient()
    Database.client = client
    Database.db = client["plantbuddy_test"]
    yield Database.db
    Database.client = None
    Database.db = None


class StubWeatherService(WeatherService):
    """WeatherService that answers from a table instead of the network."""

    def __init__(self, snapshots: Optional[Dict[str, WeatherSnapshot]] = None, api_key: str = "test-key"):
        super().__init__(api_key=api_key)
        self.default_location = "Delhi,IN"
        self.snapshots = snapshots or {}
        self.default_snapshot = WeatherSnapshot(temp_c=22, humidity=60, rain_mm=0, wind_ms=1, description="clear sky")
        self.calls: List[WeatherLocation] = []

    async def fetch_weather(self, location: Optional[WeatherLocation] = None) -> WeatherSnapshot:
        self.ensure_configured()
        self.calls.append(location)
        key = location.describe() if location else self.default_location
        snapshot = self.snapshots.get(key, self.default_snapshot)
        if isinstance(snapshot, Exception):
            raise snapshot
        return snapshot


@pytest.fixture
def stub_weather():
    return StubWeatherService()


async def insert_plant(db, name: str = "Tomato", status: str = "active", location: Optional[dict] = None, **extra) -> str:
    doc = {
        "name": name,
        "status": status,
        "meta": {"location": location} if location else {},
        "planted_at": NOW,
        "created_at": NOW,
        "deleted_at": None,
    }
    doc.update(extra)
    result = await db.plants.insert_one(doc)
    return str(result.inserted_id)


async def insert_reminder(db, plant_id: str, next_at: datetime, repeat_days: int = 0, kind: str = "water", note: Optional[str] = None):
    result = await db.reminders.insert_one({
        "plant_id": plant_id,
        "kind": kind,
        "note": note,
        "next_at": next_at,
        "repeat_days": repeat_days,
        "created_at": NOW,
    })
    return result.inserted_id
