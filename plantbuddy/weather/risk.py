"""Weather risk rules for plants.

A deterministic rules engine (no network calls): every rule is checked
against one snapshot, matched rules contribute an issue line, and the overall
level is the most severe level of any matched rule. A later warning rule never
brings a critical result back down.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from plantbuddy.alerts.models import AlertLevel
from plantbuddy.weather.models import RiskEvaluation, WeatherLocation, WeatherSnapshot

HEAT_WARNING_C = 35
HEAT_CRITICAL_C = 40
FROST_C = 4
LOW_HUMIDITY_PCT = 30
HEAVY_RAIN_MM = 10
STRONG_WIND_MS = 10


def _fmt(value: float) -> str:
    """42.0 -> "42", 12.5 -> "12.5"."""
    return f"{value:g}"


@dataclass(frozen=True)
class RiskRule:
    name: str
    matches: Callable[[WeatherSnapshot], bool]
    issue: Callable[[WeatherSnapshot], str]
    level: Callable[[WeatherSnapshot], AlertLevel]


def _heat_level(w: WeatherSnapshot) -> AlertLevel:
    return AlertLevel.CRITICAL if w.temp_c >= HEAT_CRITICAL_C else AlertLevel.WARNING


RISK_RULES: List[RiskRule] = [
    RiskRule(
        name="heat",
        matches=lambda w: w.temp_c is not None and w.temp_c >= HEAT_WARNING_C,
        issue=lambda w: f"High temperature {_fmt(w.temp_c)}°C: risk of heat stress",
        level=_heat_level,
    ),
    RiskRule(
        name="frost",
        matches=lambda w: w.temp_c is not None and w.temp_c <= FROST_C,
        issue=lambda w: f"Low temperature {_fmt(w.temp_c)}°C: frost risk",
        level=lambda w: AlertLevel.CRITICAL,
    ),
    RiskRule(
        name="low_humidity",
        matches=lambda w: w.humidity is not None and w.humidity < LOW_HUMIDITY_PCT,
        issue=lambda w: f"Low humidity {_fmt(w.humidity)}%: misting recommended",
        level=lambda w: AlertLevel.WARNING,
    ),
    RiskRule(
        name="heavy_rain",
        matches=lambda w: w.rain_mm is not None and w.rain_mm >= HEAVY_RAIN_MM,
        issue=lambda w: f"Heavy rain (~{_fmt(w.rain_mm)} mm in the last hour): waterlogging risk",
        level=lambda w: AlertLevel.WARNING,
    ),
    RiskRule(
        name="strong_wind",
        matches=lambda w: w.wind_ms is not None and w.wind_ms >= STRONG_WIND_MS,
        issue=lambda w: f"Strong wind (~{_fmt(w.wind_ms)} m/s): secure plants",
        level=lambda w: AlertLevel.WARNING,
    ),
]


def _plain_reading(weather: WeatherSnapshot) -> str:
    temp = _fmt(weather.temp_c) if weather.temp_c is not None else "?"
    humidity = _fmt(weather.humidity) if weather.humidity is not None else "?"
    return f"Current: {weather.description or 'clear'}, {temp}°C, humidity {humidity}%"


def evaluate_risk(plant: dict, weather: WeatherSnapshot, rules: Optional[List[RiskRule]] = None) -> RiskEvaluation:
    """
    Classify weather risk for one plant.

    Args:
        plant: Plant document (only the name is used).
        weather: Current conditions.
        rules: Rule set; defaults to RISK_RULES.

    Returns:
        RiskEvaluation. With no matched rule the level is info and the
        message is the plain current reading.
    """
    issues: List[str] = []
    level = AlertLevel.INFO

    for rule in rules if rules is not None else RISK_RULES:
        if not rule.matches(weather):
            continue
        issues.append(rule.issue(weather))
        level = AlertLevel.highest(level, rule.level(weather))

    name = plant.get("name") or "your plant"
    if issues:
        title = f"Weather alert for {name}"
        message = "; ".join(issues)
    else:
        title = f"Weather update for {name}"
        message = _plain_reading(weather)

    return RiskEvaluation(title=title, message=message, issues=issues, level=level, meta=weather)


def resolve_location(plant: dict, default_location: str) -> WeatherLocation:
    """
    Pick where to look up weather for a plant.

    Precedence: meta.location {lat, lon} > meta.location {city} > default.
    """
    loc = (plant.get("meta") or {}).get("location") or {}
    if not isinstance(loc, dict):
        loc = {}

    lat, lon = loc.get("lat"), loc.get("lon")
    if lat is not None and lon is not None:
        try:
            return WeatherLocation(lat=float(lat), lon=float(lon))
        except (TypeError, ValueError):
            pass

    city = loc.get("city")
    if isinstance(city, str) and city.strip():
        return WeatherLocation(city=city.strip())

    return WeatherLocation(city=default_location)
