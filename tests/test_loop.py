"""Tests for the run-all and scheduling drivers."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from seekarr.scheduler import RunRecord, RunStatus, run_all, run_forever
from tests.helpers import FakeClock


def _executor(name: str, calls: list[str], *, error: Exception | None = None) -> MagicMock:
    executor = MagicMock()
    executor.name = name

    async def run() -> RunRecord:
        calls.append(name)
        if error is not None:
            raise error
        return RunRecord(
            instance_name=name, started_at=datetime.now(UTC), status=RunStatus.COMPLETED
        )

    executor.run = AsyncMock(side_effect=run)
    return executor


class TestRunAll:
    """Tests for run_all()."""

    @pytest.mark.asyncio
    async def test_runs_in_order(self) -> None:
        """Executors should run sequentially in configuration order."""
        calls: list[str] = []
        executors = [_executor("a", calls), _executor("b", calls), _executor("c", calls)]

        records = await run_all(executors)

        assert calls == ["a", "b", "c"]
        assert [r.instance_name for r in records] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_failure_does_not_stop_other_instances(self) -> None:
        """An exception from one instance should not affect the next."""
        calls: list[str] = []
        executors = [
            _executor("bad", calls, error=RuntimeError("boom")),
            _executor("good", calls),
        ]

        records = await run_all(executors)

        assert calls == ["bad", "good"]
        assert records[0].status is RunStatus.FAILED
        assert "boom" in records[0].errors[0]
        assert records[1].status is RunStatus.COMPLETED


class TestRunForever:
    """Tests for run_forever()."""

    @pytest.mark.asyncio
    async def test_zero_interval_runs_once(self, fake_clock: FakeClock) -> None:
        """interval_minutes=0 should run a single pass without sleeping."""
        calls: list[str] = []

        await run_forever([_executor("a", calls)], 0, sleep=fake_clock.sleep)

        assert calls == ["a"]
        assert fake_clock.sleeps == []

    @pytest.mark.asyncio
    async def test_sleeps_between_passes(self, fake_clock: FakeClock) -> None:
        """Passes should be separated by interval_minutes of sleep."""
        calls: list[str] = []
        executors = [_executor("a", calls), _executor("b", calls)]

        await run_forever(executors, 5, sleep=fake_clock.sleep, max_passes=3)

        assert calls == ["a", "b"] * 3
        assert fake_clock.sleeps == [300, 300]

    @pytest.mark.asyncio
    async def test_failing_instance_keeps_loop_alive(self, fake_clock: FakeClock) -> None:
        """A failing instance should not abort the scheduling loop."""
        calls: list[str] = []
        executors = [_executor("bad", calls, error=ValueError("x")), _executor("ok", calls)]

        await run_forever(executors, 1, sleep=fake_clock.sleep, max_passes=2)

        assert calls == ["bad", "ok", "bad", "ok"]
