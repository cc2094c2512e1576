"""Per-instance search run: discover, filter, sample, dispatch, record."""

from __future__ import annotations

import logging
import random
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from seekarr.logging_utils import InstanceLogger
from seekarr.models.common import CandidateKind
from seekarr.providers import create_provider
from seekarr.rate_limiter import RateLimiter
from seekarr.scheduler.models import RunRecord, RunStatus
from seekarr.state import JsonSearchHistoryStore

if TYPE_CHECKING:
    from pathlib import Path

    from seekarr.config import Config, InstanceConfig
    from seekarr.models.common import SearchCandidate
    from seekarr.providers import Provider
    from seekarr.state import SearchHistoryStore

logger = logging.getLogger(__name__)

BATCH_SIZE = 5


def chunk(ids: list[int], size: int = BATCH_SIZE) -> list[list[int]]:
    """Split ids into consecutive batches of at most `size`."""
    return [ids[i : i + size] for i in range(0, len(ids), size)]


class SearchExecutor:
    """Runs one search pass for a single instance.

    Each call to `run()` fetches candidates, drops the recently searched ones
    when a history store is configured, picks a random sample of at most
    `search_limit`, and dispatches it in rate-limited batches. Nothing raised
    during a run escapes `run()`; failures are logged and reported on the
    returned RunRecord.
    """

    def __init__(
        self,
        config: InstanceConfig,
        provider: Provider,
        *,
        history: SearchHistoryStore | None = None,
        rate_limiter: RateLimiter | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            config: Instance configuration
            provider: Backend used to find candidates and dispatch searches
            history: Search history store, or None to search without history
            rate_limiter: Limiter for search commands; defaults to one sized
                from `config.rate_limit_per_minute`
            rng: Random source for sampling
        """
        self.config = config
        self.provider = provider
        self.history = history
        self.rate_limiter = rate_limiter or RateLimiter(config.rate_limit_per_minute)
        self._rng = rng or random.Random()
        self.log = InstanceLogger(logger, config.name)

    @property
    def name(self) -> str:
        return self.config.name

    def _select(self, candidates: list[SearchCandidate]) -> list[SearchCandidate]:
        """Pick a uniformly random sample of at most `search_limit` candidates."""
        shuffled = list(candidates)
        self._rng.shuffle(shuffled)
        return shuffled[: self.config.search_limit]

    def _log_selection(self, selected: list[SearchCandidate], prefix: str) -> None:
        verb = "Would search" if self.config.dry_run else "Searching"
        for kind, label in ((CandidateKind.MISSING, "missing"), (CandidateKind.UPGRADE, "upgrade")):
            items = [c for c in selected if c.kind is kind]
            if not items:
                continue
            self.log.info("%s%s %d %s items", prefix, verb, len(items), label)
            for item in items:
                self.log.info("%s  [%s] %s", prefix, label, item.title)

    async def run(self) -> RunRecord:
        """Execute one search pass.

        Returns:
            RunRecord describing what was found, selected and searched
        """
        record = RunRecord(instance_name=self.name, started_at=datetime.now(UTC))
        try:
            await self._run(record)
        except Exception as e:
            self.log.exception("Run failed: %s", e)
            record.errors.append(f"Run failed: {e}")
            record.status = RunStatus.FAILED
        record.completed_at = datetime.now(UTC)
        return record

    async def _run(self, record: RunRecord) -> None:
        prefix = "[DRY RUN] " if self.config.dry_run else ""
        self.log.info("%sStarting search (mode: %s)", prefix, self.config.search_mode.value)

        try:
            candidates = await self.provider.get_candidates()
        except Exception as e:
            self.log.error("Failed to fetch candidates: %s", e)
            record.errors.append(f"Failed to fetch candidates: {e}")
            record.status = RunStatus.FAILED
            return

        record.candidates_found = len(candidates)
        if not candidates:
            self.log.info("No candidates found")
            record.status = RunStatus.NO_CANDIDATES
            return

        self.log.info("Found %d candidates", len(candidates))

        if self.history is not None:
            recent = set(self.history.filter_recent([c.id for c in candidates]))
            candidates = [c for c in candidates if c.id not in recent]
            record.skipped_recent = record.candidates_found - len(candidates)
            if record.skipped_recent:
                self.log.info(
                    "Skipped %d recently searched (within %gh)",
                    record.skipped_recent,
                    self.config.search_frequency_hours,
                )
            if not candidates:
                self.log.info("No candidates remaining after filtering")
                record.status = RunStatus.ALL_RECENT
                return

        selected = self._select(candidates)
        selected_ids = [c.id for c in selected]
        record.selected_ids = selected_ids
        self._log_selection(selected, prefix)

        if self.config.dry_run:
            record.status = RunStatus.DRY_RUN
            return

        for batch in chunk(selected_ids):
            await self.rate_limiter.wait()
            try:
                await self.provider.search(batch)
            except Exception as e:
                self.log.error("Search command failed for %s: %s", batch, e)
                record.errors.append(f"Search command failed for {batch}: {e}")
                record.failed_batches += 1
                continue
            record.searched_ids.extend(batch)

        if self.history is not None:
            self.history.record(selected_ids)
            try:
                self.history.save()
            except OSError as e:
                self.log.error("Failed to save search history: %s", e)
                record.errors.append(f"Failed to save search history: {e}")
            else:
                record.history_saved = True

        record.status = RunStatus.COMPLETED
        self.log.info(
            "Run complete: %d/%d searched, %d batch(es) failed",
            len(record.searched_ids),
            len(selected_ids),
            record.failed_batches,
        )


def create_history(config: InstanceConfig, data_dir: Path) -> SearchHistoryStore | None:
    """Build the history store for an instance, or None when disabled.

    History is disabled when `search_frequency_hours <= 0`.
    """
    if not config.history_enabled:
        return None
    return JsonSearchHistoryStore(data_dir, config.name, config.search_frequency_hours)


def build_executors(config: Config) -> list[SearchExecutor]:
    """Create one executor per configured instance.

    Args:
        config: Application configuration

    Returns:
        Executors in configuration order
    """
    return [
        SearchExecutor(
            inst,
            create_provider(inst, timeout=config.timeout),
            history=create_history(inst, config.data_dir),
        )
        for inst in config.instances
    ]
