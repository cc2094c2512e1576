"""Candidate discovery and search dispatch for each backend type."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from seekarr.clients.base import DEFAULT_TIMEOUT
from seekarr.clients.radarr import RadarrClient
from seekarr.clients.sonarr import SonarrClient
from seekarr.models.common import CandidateKind, InstanceType, SearchCandidate

if TYPE_CHECKING:
    from seekarr.config import InstanceConfig

logger = logging.getLogger(__name__)


class Provider(Protocol):
    """What the executor needs from a backend."""

    async def get_candidates(self) -> list[SearchCandidate]:
        """Enumerate items that are missing or below the quality cutoff."""
        ...

    async def search(self, ids: list[int]) -> None:
        """Ask the backend to search for the given item ids."""
        ...


class RadarrProvider:
    """Finds missing and upgradable movies in a Radarr instance.

    The whole library is fetched in one call and filtered client-side. A movie
    without a file is only ever a missing candidate, never an upgrade.
    """

    def __init__(self, config: InstanceConfig, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.config = config
        self.timeout = timeout

    def _client(self) -> RadarrClient:
        return RadarrClient(self.config.url, self.config.api_key, timeout=self.timeout)

    async def get_candidates(self) -> list[SearchCandidate]:
        """Derive search candidates from the movie library.

        Returns:
            Candidates in library order
        """
        async with self._client() as client:
            movies = await client.get_all_movies()
        logger.debug("%s: library has %d movies", self.config.name, len(movies))

        mode = self.config.search_mode
        candidates: list[SearchCandidate] = []
        for movie in movies:
            if self.config.monitored_only and not movie.monitored:
                continue

            if mode.includes_missing and not movie.has_file:
                candidates.append(
                    SearchCandidate(id=movie.id, title=movie.title, kind=CandidateKind.MISSING)
                )
                continue

            if mode.includes_upgrades and movie.cutoff_not_met:
                candidates.append(
                    SearchCandidate(id=movie.id, title=movie.title, kind=CandidateKind.UPGRADE)
                )

        return candidates

    async def search(self, ids: list[int]) -> None:
        async with self._client() as client:
            await client.search_movies(ids)


class SonarrProvider:
    """Finds missing and upgradable episodes in a Sonarr instance.

    Uses the paginated wanted/missing and wanted/cutoff lists, fetching only
    the ones the search mode needs. Monitored filtering happens server-side.
    """

    def __init__(self, config: InstanceConfig, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.config = config
        self.timeout = timeout

    def _client(self) -> SonarrClient:
        return SonarrClient(self.config.url, self.config.api_key, timeout=self.timeout)

    async def get_candidates(self) -> list[SearchCandidate]:
        """Derive search candidates from the wanted lists.

        Returns:
            Missing episodes first, then upgrade episodes
        """
        mode = self.config.search_mode
        monitored = self.config.monitored_only
        candidates: list[SearchCandidate] = []

        async with self._client() as client:
            if mode.includes_missing:
                for ep in await client.get_wanted("missing", monitored=monitored):
                    candidates.append(
                        SearchCandidate(
                            id=ep.id, title=ep.display_title, kind=CandidateKind.MISSING
                        )
                    )

            if mode.includes_upgrades:
                for ep in await client.get_wanted("cutoff", monitored=monitored):
                    candidates.append(
                        SearchCandidate(
                            id=ep.id, title=ep.display_title, kind=CandidateKind.UPGRADE
                        )
                    )

        return candidates

    async def search(self, ids: list[int]) -> None:
        async with self._client() as client:
            await client.search_episodes(ids)


def create_provider(config: InstanceConfig, *, timeout: float = DEFAULT_TIMEOUT) -> Provider:
    """Build the provider matching an instance's type.

    Args:
        config: Instance configuration
        timeout: HTTP request timeout in seconds

    Returns:
        A RadarrProvider or SonarrProvider
    """
    if config.type is InstanceType.RADARR:
        return RadarrProvider(config, timeout=timeout)
    if config.type is InstanceType.SONARR:
        return SonarrProvider(config, timeout=timeout)
    raise ValueError(f"Unsupported instance type: {config.type!r}")
