"""
MongoDB database connection and utilities.
"""

import logging

import certifi
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from plantbuddy.core.config import get_settings

logger = logging.getLogger(__name__)


class Database:
    """MongoDB database connection manager."""
    
    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None
    
    @classmethod
    async def connect(cls):
        """Connect to MongoDB."""
        settings = get_settings()
        client_kwargs = {}
        if "mongodb+srv://" in settings.MONGO_URI or "ssl=true" in settings.MONGO_URI.lower():
            client_kwargs["tlsCAFile"] = certifi.where()
        cls.client = AsyncIOMotorClient(settings.MONGO_URI, **client_kwargs)
        cls.db = cls.client[settings.MONGO_DB_NAME]
        
        # Create indexes
        await cls._create_indexes()
        
        logger.info(f"Connected to MongoDB: {settings.MONGO_DB_NAME}")
    
    @classmethod
    async def disconnect(cls):
        """Disconnect from MongoDB."""
        if cls.client:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("Disconnected from MongoDB")
    
    @classmethod
    async def _create_indexes(cls):
        """Create database indexes for better query performance."""
        # Plants: the weather pass selects active, non-deleted plants
        await cls.db.plants.create_index([("status", 1), ("deleted_at", 1)])
        
        # Reminders: the due-set query is a range scan on next_at
        await cls.db.reminders.create_index("next_at")
        await cls.db.reminders.create_index("plant_id")
        
        # Alerts: listed newest first, filtered by plant / unread
        await cls.db.alerts.create_index([("plant_id", 1), ("created_at", -1)])
        await cls.db.alerts.create_index([("read", 1), ("created_at", -1)])
        
        # Job locks expire on their own once the lease is over
        await cls.db.job_locks.create_index("expires_at", expireAfterSeconds=0)
    
    @classmethod
    def get_collection(cls, name: str):
        """Get a collection by name."""
        return cls.db[name]


def get_db() -> AsyncIOMotorDatabase:
    """Get the database instance."""
    return Database.db
