"""Drivers that run every instance once or on an interval."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from seekarr.scheduler.models import RunRecord, RunStatus

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from seekarr.scheduler.executor import SearchExecutor

logger = logging.getLogger(__name__)


async def run_all(executors: Sequence[SearchExecutor]) -> list[RunRecord]:
    """Run every executor once, strictly one after another.

    An exception escaping one executor is logged and recorded as a failed run;
    the remaining executors still run.

    Args:
        executors: Executors in the order they should run

    Returns:
        One RunRecord per executor
    """
    records: list[RunRecord] = []
    for executor in executors:
        try:
            records.append(await executor.run())
        except Exception as e:
            logger.exception("Instance %s failed: %s", executor.name, e)
            now = datetime.now(UTC)
            records.append(
                RunRecord(
                    instance_name=executor.name,
                    started_at=now,
                    completed_at=now,
                    status=RunStatus.FAILED,
                    errors=[f"Instance failed: {e}"],
                )
            )
    return records


async def run_forever(
    executors: Sequence[SearchExecutor],
    interval_minutes: int,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    max_passes: int | None = None,
) -> None:
    """Run all executors, then sleep, until cancelled.

    Args:
        executors: Executors to run on every pass
        interval_minutes: Minutes between passes; 0 runs a single pass
        sleep: Coroutine used to wait between passes
        max_passes: Stop after this many passes (None = forever)
    """
    if interval_minutes == 0:
        logger.info("Running once (interval_minutes = 0)")
        await run_all(executors)
        logger.info("Done")
        return

    passes = 0
    while True:
        await run_all(executors)
        passes += 1
        if max_passes is not None and passes >= max_passes:
            return
        logger.info("Sleeping for %d minutes...", interval_minutes)
        await sleep(interval_minutes * 60)
