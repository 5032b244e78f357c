"""Alerts API routes."""

from typing import Optional
from fastapi import APIRouter, Query

from plantbuddy.core.config import get_settings
from plantbuddy.alerts.models import AlertResponse, AlertListResponse
from plantbuddy.alerts.service import AlertService

router = APIRouter(prefix="/alerts", tags=["Alerts"])


@router.get("", response_model=AlertListResponse)
async def get_alerts(
    plant_id: Optional[str] = Query(default=None),
    unread: bool = Query(default=False),
    limit: Optional[int] = Query(default=None, ge=1),
):
    """
    List alerts, newest first.
    
    Filter by `plant_id`, or `unread=true` for unread only. Capped at
    ALERT_LIST_LIMIT.
    """
    cap = get_settings().ALERT_LIST_LIMIT
    alerts, unread_count = await AlertService.list_alerts(
        plant_id=plant_id,
        unread_only=unread,
        limit=min(limit or cap, cap),
    )
    return AlertListResponse(alerts=alerts, unread_count=unread_count)


@router.post("/{alert_id}/read", response_model=AlertResponse)
async def mark_alert_read(alert_id: str):
    """Mark a specific alert as read."""
    return await AlertService.mark_as_read(alert_id)
