"""Job guard shared by the in-process scheduler and the one-off script."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional

from plantbuddy.scheduler.reports import BatchReport

logger = logging.getLogger(__name__)


class JobRunner:
    """
    Runs one periodic job.

    - A run that starts while the previous run of the same job is still in
      progress is skipped, so the due set is never processed twice at once.
    - Exceptions are logged and swallowed; the next tick runs normally.
    """

    def __init__(self, name: str, job: Callable[[], Awaitable[BatchReport]]):
        self.name = name
        self._job = job
        self._running = False
        self.runs = 0
        self.skipped = 0
        self.last_started_at: Optional[datetime] = None
        self.last_report: Optional[BatchReport] = None
        self.last_error: Optional[str] = None

    @property
    def running(self) -> bool:
        return self._running

    async def run(self) -> Optional[BatchReport]:
        if self._running:
            self.skipped += 1
            logger.warning(f"Skipping {self.name} run: previous run still in progress")
            return None

        self._running = True
        self.runs += 1
        self.last_started_at = datetime.utcnow()
        try:
            report = await self._job()
            self.last_report = report
            self.last_error = None
            return report
        except Exception as e:
            self.last_error = str(e) or type(e).__name__
            logger.exception(f"{self.name} job failed: {e}")
            return None
        finally:
            self._running = False

    def status(self) -> dict:
        return {
            "running": self._running,
            "runs": self.runs,
            "skipped": self.skipped,
            "last_started_at": self.last_started_at,
            "last_report": self.last_report.summary() if self.last_report else None,
            "last_error": self.last_error,
        }
