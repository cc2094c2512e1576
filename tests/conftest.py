"""Shared fixtures for seekarr tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from seekarr.config import InstanceConfig
from seekarr.models.common import InstanceType, SearchMode
from tests.helpers import FakeClock


@pytest.fixture
def fake_clock() -> FakeClock:
    """A fake monotonic clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def make_instance() -> Callable[..., InstanceConfig]:
    """Factory for InstanceConfig with test defaults."""

    def _make(**overrides: Any) -> InstanceConfig:
        values: dict[str, Any] = {
            "name": "test-instance",
            "type": InstanceType.RADARR,
            "url": "http://radarr:7878",
            "api_key": "test-api-key",
            "search_mode": SearchMode.BOTH,
            "monitored_only": True,
            "search_limit": 10,
            "rate_limit_per_minute": 60,
            "dry_run": False,
            "search_frequency_hours": 24,
        }
        values.update(overrides)
        return InstanceConfig(**values)

    return _make
