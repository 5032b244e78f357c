"""
Application configuration using Pydantic Settings.
Loads from environment variables / .env file.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # App
    APP_NAME: str = "PlantBuddy API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    
    # MongoDB
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "plantbuddy"
    
    # Scheduler (cron expressions, UTC)
    SCHEDULER_ENABLED: bool = True
    REMINDER_CHECK_CRON: str = "* * * * *"  # every minute (dev); 5-15 min in production
    WEATHER_CHECK_CRON: str = "0 * * * *"  # hourly
    WEATHER_RUN_ON_START: bool = True
    JOB_LOCK_TTL_SECONDS: int = 900
    
    # OpenWeatherMap
    OPENWEATHER_API_KEY: str = ""
    OPENWEATHER_BASE_URL: str = "https://api.openweathermap.org/data/2.5"
    DEFAULT_LOCATION: str = "Delhi,IN"
    WEATHER_HTTP_TIMEOUT_SECONDS: float = 10.0
    WEATHER_ITEM_TIMEOUT_SECONDS: float = 30.0
    
    # Alerts
    ALERT_MIN_LEVEL: str = "warning"  # "info" persists plain weather updates too
    ALERT_DEDUPE_WINDOW_HOURS: int = 6  # 0 disables
    ALERT_LIST_LIMIT: int = 200
    
    # Celery
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_TASK_TIME_LIMIT: int = 0
    CELERY_TASK_SOFT_TIME_LIMIT: int = 0
    
    # Image analysis / uploads (consumed by the upload and AI collaborators)
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o"
    UPLOAD_DIR: str = "uploads"
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"



@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
