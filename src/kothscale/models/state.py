"""Coordinator bookkeeping types."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class ChangeKeyPolicy(StrEnum):
    """Which value decides whether settings must be re-applied."""

    LEVEL = "level"
    COUNT = "count"


class CycleOutcome(StrEnum):
    APPLIED = "applied"
    UNCHANGED = "unchanged"
    IDLE = "idle"
    FAILED = "failed"
    BUSY = "busy"


class UpdateState(BaseModel):
    """Memory of the last successfully applied update.

    Only used to avoid redundant writes; it is never persisted.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    last_key: int | None = None
    last_count: int | None = None
    last_level: int | None = None
    applied_at: datetime | None = None

    def record(self, *, key: int, count: int, level: int) -> None:
        self.last_key = key
        self.last_count = count
        self.last_level = level
        self.applied_at = datetime.now(UTC)

    def reset(self) -> None:
        self.last_key = None
        self.last_count = None
        self.last_level = None
        self.applied_at = None

    @property
    def is_set(self) -> bool:
        return self.last_key is not None
