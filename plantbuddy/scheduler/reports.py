"""Per-item results and batch reports returned by every job run."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


ItemAction = Literal[
    "advanced",
    "deleted",
    "skipped",
    "alerted",
    "suppressed",
    "failed",
]


class ItemResult(BaseModel):
    item_id: str
    ok: bool = True
    action: ItemAction
    error: Optional[str] = None


class BatchReport(BaseModel):
    job: str
    started_at: datetime = Field(default_factory=datetime.utcnow)
    finished_at: Optional[datetime] = None
    items: List[ItemResult] = Field(default_factory=list)
    aborted_reason: Optional[str] = None

    @property
    def succeeded(self) -> int:
        return sum(1 for item in self.items if item.ok)

    @property
    def failed(self) -> int:
        return sum(1 for item in self.items if not item.ok)

    def record(self, item_id: str, action: ItemAction) -> ItemResult:
        result = ItemResult(item_id=item_id, action=action)
        self.items.append(result)
        return result

    def record_failure(self, item_id: str, error: BaseException) -> ItemResult:
        err = str(error) or type(error).__name__
        if len(err) > 1200:
            err = err[:1200] + "…"
        result = ItemResult(item_id=item_id, ok=False, action="failed", error=err)
        self.items.append(result)
        return result

    def finish(self) -> "BatchReport":
        self.finished_at = datetime.utcnow()
        return self

    def summary(self) -> dict:
        return {
            "job": self.job,
            "processed": len(self.items),
            "succeeded": self.succeeded,
            "failed": self.failed,
            "aborted_reason": self.aborted_reason,
        }
