"""
PlantBuddy API - Main application entry point.

Plant care tracking: plants, care reminders and weather risk alerts.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from plantbuddy.core.config import get_settings
from plantbuddy.core.database import Database
from plantbuddy.core.logging_config import configure_logging
from plantbuddy.plants.views import router as plants_router
from plantbuddy.reminders.views import router as reminders_router
from plantbuddy.alerts.views import router as alerts_router
from plantbuddy.weather.views import router as weather_router
from plantbuddy.scheduler.scheduler import CareScheduler

settings = get_settings()
API_PREFIX = "/api"

configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    # Startup
    await Database.connect()
    scheduler = None
    if settings.SCHEDULER_ENABLED:
        scheduler = CareScheduler(settings)
        scheduler.start()
    app.state.scheduler = scheduler
    yield
    # Shutdown
    if scheduler:
        scheduler.shutdown()
    await Database.disconnect()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
## PlantBuddy API

Track your plants and let the backend keep an eye on them.

### Features

- 🌱 **Plants**: Register plants with where they live
- 💧 **Reminders**: One-off or repeating watering / fertilizer reminders
- 🌤️ **Weather Alerts**: Hourly heat, frost, humidity, rain and wind checks per plant

    """,
    lifespan=lifespan,
    docs_url=f"{API_PREFIX}/docs",
    redoc_url=f"{API_PREFIX}/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
routers = [
    plants_router,
    reminders_router,
    alerts_router,
    weather_router,
]

for router in routers:
    app.include_router(router, prefix=API_PREFIX)


@app.get("/", tags=["Health"])
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    scheduler = getattr(app.state, "scheduler", None)
    return {
        "status": "healthy",
        "database": "connected" if Database.client else "disconnected",
        "scheduler": scheduler.status() if scheduler else {"running": False},
        "version": settings.APP_VERSION,
    }
