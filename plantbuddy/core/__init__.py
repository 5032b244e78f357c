"""Core module - config, database, exceptions, logging."""

from plantbuddy.core.config import get_settings, Settings
from plantbuddy.core.database import Database, get_db
from plantbuddy.core.exceptions import (
    AppException,
    NotFoundException,
    BadRequestException,
    WeatherProviderException,
    WeatherConfigurationException,
)
from plantbuddy.core.datetimes import as_naive_utc
from plantbuddy.core.logging_config import configure_logging

__all__ = [
    "get_settings",
    "Settings",
    "Database",
    "get_db",
    "AppException",
    "NotFoundException",
    "BadRequestException",
    "WeatherProviderException",
    "WeatherConfigurationException",
    "as_naive_utc",
    "configure_logging",
]
