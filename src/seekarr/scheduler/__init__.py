"""Instance run orchestration and scheduling."""

from seekarr.scheduler.executor import (
    BATCH_SIZE,
    SearchExecutor,
    build_executors,
    chunk,
    create_history,
)
from seekarr.scheduler.loop import run_all, run_forever
from seekarr.scheduler.models import RunRecord, RunStatus

__all__ = [
    "BATCH_SIZE",
    "RunRecord",
    "RunStatus",
    "SearchExecutor",
    "build_executors",
    "chunk",
    "create_history",
    "run_all",
    "run_forever",
]
