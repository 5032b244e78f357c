"""Alert models and schemas."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class AlertLevel(str, Enum):
    """Alert severity, ordered info < warning < critical."""
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]

    @classmethod
    def highest(cls, *levels: "AlertLevel") -> "AlertLevel":
        """The most severe of the given levels."""
        return max(levels, key=lambda level: level.rank)


_LEVEL_RANK = {
    AlertLevel.INFO: 0,
    AlertLevel.WARNING: 1,
    AlertLevel.CRITICAL: 2,
}


class AlertResponse(BaseModel):
    """Response schema for an alert."""
    id: str
    plant_id: Optional[str] = None
    title: str
    message: Optional[str] = None
    level: AlertLevel = AlertLevel.INFO
    meta: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    read: bool = False


class AlertListResponse(BaseModel):
    """Response with list of alerts and unread count."""
    alerts: List[AlertResponse]
    unread_count: int
