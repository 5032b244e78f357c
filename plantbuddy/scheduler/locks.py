"""Mongo lease lock so a job never overlaps itself across worker processes."""

from __future__ import annotations

import asyncio
import logging
import socket
import uuid
from datetime import datetime, timedelta
from typing import Optional

from pymongo import ReturnDocument

from plantbuddy.core.config import get_settings
from plantbuddy.core.database import Database

logger = logging.getLogger(__name__)


class JobLock:
    """
    Named lease in the `job_locks` collection.

    acquire() succeeds if nobody holds the lease or the holder's lease has
    expired (a crashed worker cannot block the job for longer than the TTL).
    """

    def __init__(self, name: str, ttl_seconds: Optional[float] = None, owner: Optional[str] = None):
        self.name = name
        self.ttl_seconds = ttl_seconds or get_settings().JOB_LOCK_TTL_SECONDS
        self.owner = owner or f"{socket.gethostname()}:{uuid.uuid4().hex[:12]}"

    @staticmethod
    def _collection():
        return Database.get_collection("job_locks")

    async def acquire(self) -> bool:
        collection = self._collection()
        now = datetime.utcnow()

        # Make sure the lock document exists; never touches a held lease.
        await collection.update_one(
            {"_id": self.name},
            {"$setOnInsert": {"owner": None, "expires_at": now}},
            upsert=True,
        )

        doc = await collection.find_one_and_update(
            {
                "_id": self.name,
                "$or": [
                    {"owner": None},
                    {"owner": self.owner},
                    {"expires_at": {"$lte": now}},
                ],
            },
            {
                "$set": {
                    "owner": self.owner,
                    "acquired_at": now,
                    "expires_at": now + timedelta(seconds=self.ttl_seconds),
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            logger.debug(f"Lock '{self.name}' is held by another worker")
            return False
        return True

    async def renew(self) -> bool:
        """Push the lease expiry forward; False if the lease is no longer ours."""
        now = datetime.utcnow()
        doc = await self._collection().find_one_and_update(
            {"_id": self.name, "owner": self.owner},
            {"$set": {"expires_at": now + timedelta(seconds=self.ttl_seconds)}},
            return_document=ReturnDocument.AFTER,
        )
        return doc is not None

    async def keep_alive(self, interval: Optional[float] = None) -> None:
        """
        Renew the lease until cancelled.

        Run next to a long job so the lease never expires under it. Stops
        early if the lease was lost.
        """
        interval = interval or self.ttl_seconds / 3
        while True:
            await asyncio.sleep(interval)
            if not await self.renew():
                logger.warning(f"Lock '{self.name}' lost by {self.owner}")
                return

    async def release(self) -> None:
        await self._collection().update_one(
            {"_id": self.name, "owner": self.owner},
            {"$set": {"owner": None, "expires_at": datetime.utcnow()}},
        )
