"""Models describing the outcome of an instance run."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class RunStatus(str, Enum):
    """How an instance run ended."""

    RUNNING = "running"
    COMPLETED = "completed"
    DRY_RUN = "dry_run"
    NO_CANDIDATES = "no_candidates"
    ALL_RECENT = "all_recent"
    FAILED = "failed"


class RunRecord(BaseModel):
    """Record of a single instance run."""

    instance_name: str
    started_at: datetime
    completed_at: datetime | None = None
    status: RunStatus = RunStatus.RUNNING
    candidates_found: int = 0
    skipped_recent: int = 0
    selected_ids: list[int] = Field(default_factory=list)
    searched_ids: list[int] = Field(default_factory=list)
    failed_batches: int = 0
    history_saved: bool = False
    errors: list[str] = Field(default_factory=list)
