"""
Alert emitter.

Turns a risk evaluation into a stored alert, subject to policy:
- only levels at or above ALERT_MIN_LEVEL are persisted (warning by default,
  so plain "weather update" results stay out of the inbox)
- an identical unread alert for the same plant inside
  ALERT_DEDUPE_WINDOW_HOURS is not stored again
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, Union

from plantbuddy.alerts.models import AlertLevel
from plantbuddy.alerts.service import AlertService
from plantbuddy.core.config import get_settings
from plantbuddy.weather.models import RiskEvaluation

logger = logging.getLogger(__name__)


class AlertEmitter:
    """Applies the persistence policy to risk evaluations."""

    def __init__(
        self,
        min_level: Optional[Union[AlertLevel, str]] = None,
        dedupe_window_hours: Optional[int] = None,
    ):
        settings = get_settings()
        self.min_level = AlertLevel(min_level or settings.ALERT_MIN_LEVEL)
        self.dedupe_window_hours = (
            settings.ALERT_DEDUPE_WINDOW_HOURS if dedupe_window_hours is None else dedupe_window_hours
        )

    def should_persist(self, level: AlertLevel) -> bool:
        return AlertLevel(level).rank >= self.min_level.rank

    async def _is_duplicate(self, plant_id: Optional[str], evaluation: RiskEvaluation) -> bool:
        if self.dedupe_window_hours <= 0:
            return False
        since = datetime.utcnow() - timedelta(hours=self.dedupe_window_hours)
        existing = await AlertService.find_recent_duplicate(
            plant_id, evaluation.level, evaluation.message, since
        )
        return existing is not None

    async def emit(self, plant_id: Optional[str], evaluation: RiskEvaluation) -> Optional[dict]:
        """
        Persist the evaluation as an alert if policy allows.

        Returns:
            The stored alert document, or None if suppressed.
        """
        if not self.should_persist(evaluation.level):
            return None

        if await self._is_duplicate(plant_id, evaluation):
            logger.debug(f"Skipping duplicate {evaluation.level.value} alert for plant {plant_id}")
            return None

        return await AlertService.create_alert(
            plant_id=plant_id,
            title=evaluation.title,
            message=evaluation.message,
            level=evaluation.level,
            meta=evaluation.meta.model_dump(mode="json"),
        )
