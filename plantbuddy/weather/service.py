"""Weather service using OpenWeatherMap API."""

import logging
from functools import lru_cache
from typing import Optional

import httpx

from plantbuddy.core.config import get_settings
from plantbuddy.core.exceptions import (
    NotFoundException,
    WeatherProviderException,
    WeatherConfigurationException,
)
from plantbuddy.weather.models import WeatherLocation, WeatherSnapshot

logger = logging.getLogger(__name__)


def _first_description(data: dict) -> str:
    weather = data.get("weather") or []
    if weather and isinstance(weather[0], dict):
        return weather[0].get("description") or ""
    return ""


def parse_current_weather(data: dict) -> WeatherSnapshot:
    """Normalize an OpenWeatherMap current-weather payload."""
    if not isinstance(data, dict) or not isinstance(data.get("main"), dict):
        raise WeatherProviderException("Malformed weather response: missing 'main'")
    
    main = data["main"]
    wind = data.get("wind") or {}
    rain = data.get("rain") or {}
    
    return WeatherSnapshot(
        temp_c=main.get("temp"),
        humidity=main.get("humidity"),
        wind_ms=wind.get("speed"),
        rain_mm=rain.get("1h") or 0.0,
        description=_first_description(data),
        raw=data,
    )


class WeatherService:
    """Fetches current weather for a location."""
    
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.api_key = settings.OPENWEATHER_API_KEY if api_key is None else api_key
        self.base_url = (base_url or settings.OPENWEATHER_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.WEATHER_HTTP_TIMEOUT_SECONDS
        self.default_location = settings.DEFAULT_LOCATION
        self._transport = transport
    
    def ensure_configured(self) -> None:
        """Raise if the provider credential is missing."""
        if not (self.api_key or "").strip():
            raise WeatherConfigurationException()
    
    def _params_for(self, location: Optional[WeatherLocation]) -> dict:
        params = {"appid": self.api_key, "units": "metric"}
        if location and location.has_coordinates:
            params["lat"] = location.lat
            params["lon"] = location.lon
        else:
            params["q"] = (location.city if location and location.city else None) or self.default_location
        return params
    
    async def fetch_weather(self, location: Optional[WeatherLocation] = None) -> WeatherSnapshot:
        """
        Fetch current weather.
        
        Coordinates win over a city name; with neither, DEFAULT_LOCATION is used.
        """
        self.ensure_configured()
        params = self._params_for(location)
        logger.debug(f"Fetching weather for {params.get('q') or location.describe()}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(f"{self.base_url}/weather", params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise NotFoundException(
                    f"Location '{params.get('q') or location.describe()}' not found. Please check the city name."
                )
            raise WeatherProviderException(
                f"Weather fetch failed ({e.response.status_code}) for {params.get('q') or 'coordinates'}"
            )
        except httpx.HTTPError as e:
            raise WeatherProviderException(f"Failed to fetch weather data: {type(e).__name__}: {e}")
        except ValueError as e:
            raise WeatherProviderException(f"Malformed weather response: {e}")
        
        return parse_current_weather(data)


@lru_cache
def get_weather_service() -> WeatherService:
    """Shared WeatherService built from settings."""
    return WeatherService()
