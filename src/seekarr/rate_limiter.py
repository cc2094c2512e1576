"""Sliding-window rate limiter for search commands."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60.0


class RateLimiter:
    """Admit at most `max_per_minute` calls in any trailing 60 second window.

    Each `wait()` drops timestamps that have left the window. If there is room
    the call is recorded and returns at once; otherwise it sleeps until the
    oldest timestamp leaves the window and checks again. A burst of
    `max_per_minute` calls at time T therefore blocks the next call until T+60s.

    Callers are expected to be sequential; there is no fairness between
    concurrent waiters.
    """

    def __init__(
        self,
        max_per_minute: int,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the limiter.

        Args:
            max_per_minute: Calls admitted per trailing 60 seconds
            clock: Monotonic clock in seconds
            sleep: Coroutine used to suspend the caller
        """
        if max_per_minute < 1:
            raise ValueError(f"max_per_minute must be >= 1, got {max_per_minute}")
        self.max_per_minute = max_per_minute
        self._clock = clock
        self._sleep = sleep
        self._timestamps: deque[float] = deque()

    def _prune(self, now: float) -> None:
        window_start = now - WINDOW_SECONDS
        while self._timestamps and self._timestamps[0] <= window_start:
            self._timestamps.popleft()

    async def wait(self) -> None:
        """Suspend until one more call fits in the window, then record it."""
        while True:
            now = self._clock()
            self._prune(now)
            if len(self._timestamps) < self.max_per_minute:
                self._timestamps.append(now)
                return

            delay = self._timestamps[0] + WINDOW_SECONDS - now
            logger.debug("Rate limit of %d/min reached, waiting %.1fs", self.max_per_minute, delay)
            await self._sleep(delay)
