"""Search history persistence for skipping recently searched items."""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

logger = logging.getLogger(__name__)

MS_PER_HOUR = 60 * 60 * 1000


def _now_ms() -> int:
    return int(time.time() * 1000)


class SearchHistoryStore(Protocol):
    """Record of when each item was last searched."""

    def filter_recent(self, ids: Iterable[int]) -> list[int]:
        """Return the ids that were searched within the frequency window."""
        ...

    def record(self, ids: Iterable[int]) -> None:
        """Mark ids as searched now."""
        ...

    def save(self) -> None:
        """Drop expired entries and persist the rest."""
        ...


@dataclass
class SearchHistoryFile:
    """On-disk shape of an instance's history: item id -> epoch milliseconds."""

    search_history: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {"searchHistory": dict(self.search_history)}

    @classmethod
    def from_dict(cls, data: object) -> SearchHistoryFile:
        """Create from parsed JSON, ignoring entries of the wrong shape."""
        if not isinstance(data, dict):
            return cls()
        history_data = data.get("searchHistory", {})
        if not isinstance(history_data, dict):
            return cls()

        history: dict[str, int] = {}
        for key, value in history_data.items():
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                history[str(key)] = int(value)
        return cls(search_history=history)


class JsonSearchHistoryStore:
    """Search history for one instance, stored as `<data_dir>/<instance>.json`.

    `filter_recent` and `record` only touch memory. `save` prunes entries older
    than the frequency window and then writes a temporary sibling file that is
    renamed over the real one, so a crash never leaves a partial file behind.
    """

    def __init__(
        self,
        data_dir: Path,
        instance_name: str,
        frequency_hours: float,
        *,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        """Initialize the store and load any existing history.

        Args:
            data_dir: Directory holding history files; created if missing
            instance_name: Instance the history belongs to
            frequency_hours: Minimum hours before an id may be searched again
            clock: Current time in epoch milliseconds
        """
        data_dir.mkdir(parents=True, exist_ok=True)
        self.path = data_dir / f"{instance_name}.json"
        self.max_age_ms = frequency_hours * MS_PER_HOUR
        self._clock = clock
        self._state = self._load()

    def _load(self) -> SearchHistoryFile:
        """Load history from file, falling back to empty history."""
        if not self.path.exists():
            return SearchHistoryFile()

        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to load search history %s: %s", self.path, e)
            return SearchHistoryFile()

        return SearchHistoryFile.from_dict(data)

    def _cutoff(self) -> float:
        return self._clock() - self.max_age_ms

    def filter_recent(self, ids: Iterable[int]) -> list[int]:
        """Return the ids that were searched within the frequency window.

        Args:
            ids: Candidate ids, in any order

        Returns:
            The subset of ids searched recently, in input order
        """
        cutoff = self._cutoff()
        history = self._state.search_history
        recent = []
        for item_id in ids:
            last_searched = history.get(str(item_id))
            if last_searched is not None and last_searched > cutoff:
                recent.append(item_id)
        return recent

    def record(self, ids: Iterable[int]) -> None:
        """Mark ids as searched now. Overwrites earlier timestamps.

        Args:
            ids: Ids that were just searched
        """
        now = self._clock()
        for item_id in ids:
            self._state.search_history[str(item_id)] = now

    def save(self) -> None:
        """Prune expired entries and write the history file atomically.

        Raises:
            OSError: If the file cannot be written
        """
        cutoff = self._cutoff()
        self._state.search_history = {
            key: ts for key, ts in self._state.search_history.items() if ts > cutoff
        }

        tmp_path = self.path.with_name(self.path.name + ".tmp")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(self._state.to_dict(), f, indent=2)
        os.replace(tmp_path, self.path)

    def entries(self) -> dict[int, int]:
        """Get a copy of the in-memory history as id -> epoch milliseconds."""
        result: dict[int, int] = {}
        for key, ts in self._state.search_history.items():
            try:
                result[int(key)] = ts
            except ValueError:
                continue
        return result
