"""
Weather risk pass.

Runs on every weather tick: for each active plant, resolve its location,
fetch current weather, evaluate the risk rules and hand the result to the
alert emitter. A missing API key stops the whole pass up front (nothing is
fetched, no alerts are written); any other failure only affects that plant.
"""

import asyncio
import logging
from typing import Optional

from plantbuddy.alerts.emitter import AlertEmitter
from plantbuddy.core.config import get_settings
from plantbuddy.core.exceptions import NotFoundException, WeatherConfigurationException
from plantbuddy.plants.service import PlantService
from plantbuddy.scheduler.reports import BatchReport
from plantbuddy.weather.models import PlantRiskResponse, RiskEvaluation
from plantbuddy.weather.risk import evaluate_risk, resolve_location
from plantbuddy.weather.service import WeatherService, get_weather_service

logger = logging.getLogger(__name__)


async def evaluate_plant(plant: dict, weather_service: WeatherService) -> RiskEvaluation:
    """Fetch weather for one plant's location and evaluate it."""
    location = resolve_location(plant, weather_service.default_location)
    weather = await weather_service.fetch_weather(location)
    return evaluate_risk(plant, weather)


async def check_weather_risks(
    weather_service: Optional[WeatherService] = None,
    emitter: Optional[AlertEmitter] = None,
) -> BatchReport:
    """
    Evaluate weather risk for every active plant.

    Returns:
        BatchReport with one ItemResult per plant ("alerted" / "suppressed" /
        "failed"), or aborted_reason="configuration" if the provider key is
        missing.
    """
    settings = get_settings()
    weather_service = weather_service or get_weather_service()
    emitter = emitter or AlertEmitter()
    report = BatchReport(job="weather")

    try:
        weather_service.ensure_configured()
    except WeatherConfigurationException as e:
        logger.error(f"Weather check skipped: {e.detail}")
        report.aborted_reason = "configuration"
        return report.finish()

    plants = await PlantService.find_active_plants()
    if not plants:
        return report.finish()

    logger.info(f"Weather check: evaluating {len(plants)} active plants")

    for plant in plants:
        plant_id = str(plant["_id"])
        try:
            evaluation = await asyncio.wait_for(
                evaluate_plant(plant, weather_service),
                timeout=settings.WEATHER_ITEM_TIMEOUT_SECONDS,
            )
            alert = await emitter.emit(plant_id, evaluation)
            report.record(plant_id, "alerted" if alert else "suppressed")
        except WeatherConfigurationException as e:
            logger.error(f"Weather check aborted: {e.detail}")
            report.aborted_reason = "configuration"
            break
        except asyncio.TimeoutError as e:
            logger.error(f"Weather check timed out for plant {plant_id}")
            report.record_failure(plant_id, e)
        except Exception as e:
            logger.error(f"Weather check failed for plant {plant_id}: {e}")
            report.record_failure(plant_id, e)

    report.finish()
    logger.info(f"Weather check complete: {report.summary()}")
    return report


async def evaluate_plant_now(plant_id: str, weather_service: Optional[WeatherService] = None) -> PlantRiskResponse:
    """On-demand risk check for one plant; nothing is persisted."""
    weather_service = weather_service or get_weather_service()
    plant = await PlantService.find_plant(plant_id)
    if not plant:
        raise NotFoundException("Plant not found")

    location = resolve_location(plant, weather_service.default_location)
    weather = await weather_service.fetch_weather(location)
    return PlantRiskResponse(
        plant_id=plant_id,
        location=location,
        evaluation=evaluate_risk(plant, weather),
    )
