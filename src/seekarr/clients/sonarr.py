"""Sonarr API client."""

from __future__ import annotations

import logging
from typing import Literal

from seekarr.clients.base import BaseArrClient
from seekarr.models.sonarr import WantedEpisode, WantedPage

logger = logging.getLogger(__name__)

PAGE_SIZE = 50

WantedList = Literal["missing", "cutoff"]


class SonarrClient(BaseArrClient):
    """Client for interacting with the Sonarr API.

    Example:
        async with SonarrClient("http://localhost:8989", "api-key") as client:
            missing = await client.get_wanted("missing", monitored=True)
            upgrades = await client.get_wanted("cutoff", monitored=True)
            await client.search_episodes([e.id for e in missing])
    """

    async def get_wanted_page(
        self, wanted: WantedList, *, monitored: bool, page: int, page_size: int = PAGE_SIZE
    ) -> WantedPage:
        """Fetch one page of a wanted list.

        Args:
            wanted: "missing" for episodes without a file, "cutoff" for
                episodes whose file is below the quality cutoff
            monitored: Value of the server-side monitored filter
            page: 1-based page number
            page_size: Records per page

        Returns:
            WantedPage with the page's records and the reported total
        """
        data = await self._get(
            f"/api/v3/wanted/{wanted}",
            params={
                "includeSeries": "true",
                "monitored": "true" if monitored else "false",
                "page": page,
                "pageSize": page_size,
                "sortKey": "airDateUtc",
                "sortDirection": "descending",
            },
        )
        return WantedPage.model_validate(data)

    async def get_wanted(self, wanted: WantedList, *, monitored: bool) -> list[WantedEpisode]:
        """Fetch every page of a wanted list.

        Stops once the accumulated records reach the reported total, or when a
        page comes back short (guards against a total that never matches).

        Args:
            wanted: "missing" or "cutoff"
            monitored: Value of the server-side monitored filter

        Returns:
            All episodes on the list, in server order
        """
        episodes: list[WantedEpisode] = []
        page = 1
        while True:
            result = await self.get_wanted_page(wanted, monitored=monitored, page=page)
            episodes.extend(result.records)
            if len(episodes) >= result.total_records or len(result.records) < PAGE_SIZE:
                break
            page += 1

        logger.debug("Fetched %d wanted/%s episodes in %d page(s)", len(episodes), wanted, page)
        return episodes

    async def search_episodes(self, episode_ids: list[int]) -> None:
        """Queue an EpisodeSearch command for the given episodes.

        Args:
            episode_ids: Sonarr episode IDs to search for
        """
        await self._post(
            "/api/v3/command",
            json={"name": "EpisodeSearch", "episodeIds": list(episode_ids)},
        )
