"""Tests for candidate discovery in the Radarr and Sonarr providers."""

from __future__ import annotations

import json
from collections.abc import Callable

import pytest
import respx
from httpx import Response

from seekarr.config import InstanceConfig
from seekarr.models.common import CandidateKind, InstanceType, SearchMode
from seekarr.providers import RadarrProvider, SonarrProvider, create_provider

MakeInstance = Callable[..., InstanceConfig]


def _movie(
    movie_id: int, *, monitored: bool = True, has_file: bool, cutoff_not_met: bool = False
) -> dict:
    data: dict = {
        "id": movie_id,
        "title": f"Movie {movie_id}",
        "monitored": monitored,
        "hasFile": has_file,
    }
    if has_file:
        data["movieFile"] = {"id": movie_id * 10, "qualityCutoffNotMet": cutoff_not_met}
    return data


def _wanted(records: list[dict]) -> dict:
    return {"page": 1, "pageSize": 50, "totalRecords": len(records), "records": records}


def _ep(ep_id: int, season: int, episode: int, series: str = "The Show") -> dict:
    return {
        "id": ep_id,
        "title": "Ep",
        "seasonNumber": season,
        "episodeNumber": episode,
        "series": {"id": 1, "title": series},
    }


class TestRadarrProvider:
    """Tests for RadarrProvider.get_candidates()."""

    def _mock_movies(self, movies: list[dict]) -> None:
        respx.get("http://radarr:7878/api/v3/movie").mock(
            return_value=Response(200, json=movies)
        )

    @respx.mock
    @pytest.mark.asyncio
    async def test_missing_movie(self, make_instance: MakeInstance) -> None:
        """Monitored movie with no file should be a missing candidate."""
        self._mock_movies([_movie(1, has_file=False)])

        candidates = await RadarrProvider(make_instance()).get_candidates()

        assert len(candidates) == 1
        assert candidates[0].id == 1
        assert candidates[0].title == "Movie 1"
        assert candidates[0].kind is CandidateKind.MISSING

    @respx.mock
    @pytest.mark.asyncio
    async def test_upgrade_movie(self, make_instance: MakeInstance) -> None:
        """Monitored movie whose file is below cutoff should be an upgrade candidate."""
        self._mock_movies(
            [_movie(1, has_file=True, cutoff_not_met=True), _movie(2, has_file=True)]
        )

        candidates = await RadarrProvider(make_instance()).get_candidates()

        assert [(c.id, c.kind) for c in candidates] == [(1, CandidateKind.UPGRADE)]

    @respx.mock
    @pytest.mark.asyncio
    async def test_movie_is_never_both_kinds(self, make_instance: MakeInstance) -> None:
        """A movie without a file is only a missing candidate, even if flagged below cutoff."""
        self._mock_movies(
            [
                {
                    "id": 1,
                    "title": "Odd",
                    "monitored": True,
                    "hasFile": False,
                    "movieFile": {"id": 10, "qualityCutoffNotMet": True},
                }
            ]
        )

        candidates = await RadarrProvider(make_instance()).get_candidates()

        assert [(c.id, c.kind) for c in candidates] == [(1, CandidateKind.MISSING)]

    @respx.mock
    @pytest.mark.asyncio
    async def test_missing_mode_excludes_upgrades(self, make_instance: MakeInstance) -> None:
        """search_mode=missing should return no upgrade candidates."""
        self._mock_movies(
            [_movie(1, has_file=False), _movie(2, has_file=True, cutoff_not_met=True)]
        )

        provider = RadarrProvider(make_instance(search_mode=SearchMode.MISSING))
        candidates = await provider.get_candidates()

        assert [c.id for c in candidates] == [1]

    @respx.mock
    @pytest.mark.asyncio
    async def test_upgrades_mode_excludes_missing(self, make_instance: MakeInstance) -> None:
        """search_mode=upgrades should return no missing candidates."""
        self._mock_movies(
            [_movie(1, has_file=False), _movie(2, has_file=True, cutoff_not_met=True)]
        )

        provider = RadarrProvider(make_instance(search_mode=SearchMode.UPGRADES))
        candidates = await provider.get_candidates()

        assert [(c.id, c.kind) for c in candidates] == [(2, CandidateKind.UPGRADE)]

    @respx.mock
    @pytest.mark.asyncio
    async def test_unmonitored_excluded_when_monitored_only(
        self, make_instance: MakeInstance
    ) -> None:
        """Unmonitored movies should be skipped with monitored_only=True."""
        self._mock_movies([_movie(1, monitored=False, has_file=False)])

        candidates = await RadarrProvider(make_instance(monitored_only=True)).get_candidates()

        assert candidates == []

    @respx.mock
    @pytest.mark.asyncio
    async def test_unmonitored_included_when_not_monitored_only(
        self, make_instance: MakeInstance
    ) -> None:
        """Unmonitored movies should be included with monitored_only=False."""
        self._mock_movies([_movie(1, monitored=False, has_file=False)])

        candidates = await RadarrProvider(make_instance(monitored_only=False)).get_candidates()

        assert [c.id for c in candidates] == [1]

    @respx.mock
    @pytest.mark.asyncio
    async def test_search_dispatches_movies_search(self, make_instance: MakeInstance) -> None:
        """search() should send one MoviesSearch command."""
        route = respx.post("http://radarr:7878/api/v3/command").mock(
            return_value=Response(201, json={"id": 1})
        )

        await RadarrProvider(make_instance()).search([4, 5])

        assert route.call_count == 1
        assert json.loads(route.calls.last.request.content)["movieIds"] == [4, 5]


class TestSonarrProvider:
    """Tests for SonarrProvider.get_candidates()."""

    @pytest.fixture
    def sonarr_instance(self, make_instance: MakeInstance) -> Callable[..., InstanceConfig]:
        def _make(**overrides: object) -> InstanceConfig:
            return make_instance(type=InstanceType.SONARR, url="http://sonarr:8989", **overrides)

        return _make

    @respx.mock
    @pytest.mark.asyncio
    async def test_both_modes_fetch_both_lists(self, sonarr_instance: MakeInstance) -> None:
        """search_mode=both should return missing then upgrade episodes."""
        respx.route(method="GET", host="sonarr", path="/api/v3/wanted/missing").mock(
            return_value=Response(200, json=_wanted([_ep(1, 1, 2)]))
        )
        respx.route(method="GET", host="sonarr", path="/api/v3/wanted/cutoff").mock(
            return_value=Response(200, json=_wanted([_ep(2, 10, 1, series="Other")]))
        )

        candidates = await SonarrProvider(sonarr_instance()).get_candidates()

        assert [(c.id, c.title, c.kind) for c in candidates] == [
            (1, "The Show - S01E02", CandidateKind.MISSING),
            (2, "Other - S10E01", CandidateKind.UPGRADE),
        ]

    @respx.mock
    @pytest.mark.asyncio
    async def test_missing_mode_skips_cutoff_list(self, sonarr_instance: MakeInstance) -> None:
        """Only the lists the mode needs should be requested."""
        missing = respx.route(method="GET", host="sonarr", path="/api/v3/wanted/missing").mock(
            return_value=Response(200, json=_wanted([_ep(1, 1, 1)]))
        )
        cutoff = respx.route(method="GET", host="sonarr", path="/api/v3/wanted/cutoff").mock(
            return_value=Response(200, json=_wanted([]))
        )

        provider = SonarrProvider(sonarr_instance(search_mode=SearchMode.MISSING))
        candidates = await provider.get_candidates()

        assert [c.id for c in candidates] == [1]
        assert missing.call_count == 1
        assert cutoff.call_count == 0

    @respx.mock
    @pytest.mark.asyncio
    async def test_upgrades_mode_skips_missing_list(self, sonarr_instance: MakeInstance) -> None:
        """search_mode=upgrades should only request wanted/cutoff."""
        missing = respx.route(method="GET", host="sonarr", path="/api/v3/wanted/missing").mock(
            return_value=Response(200, json=_wanted([]))
        )
        respx.route(method="GET", host="sonarr", path="/api/v3/wanted/cutoff").mock(
            return_value=Response(200, json=_wanted([_ep(9, 2, 3)]))
        )

        provider = SonarrProvider(sonarr_instance(search_mode=SearchMode.UPGRADES))
        candidates = await provider.get_candidates()

        assert [(c.id, c.kind) for c in candidates] == [(9, CandidateKind.UPGRADE)]
        assert missing.call_count == 0

    @respx.mock
    @pytest.mark.asyncio
    async def test_monitored_filter_is_server_side(self, sonarr_instance: MakeInstance) -> None:
        """monitored_only should be passed as the monitored query parameter."""
        route = respx.route(method="GET", host="sonarr", path="/api/v3/wanted/missing").mock(
            return_value=Response(200, json=_wanted([]))
        )

        provider = SonarrProvider(
            sonarr_instance(search_mode=SearchMode.MISSING, monitored_only=False)
        )
        await provider.get_candidates()

        assert route.calls.last.request.url.params["monitored"] == "false"

    @respx.mock
    @pytest.mark.asyncio
    async def test_unknown_series_title(self, sonarr_instance: MakeInstance) -> None:
        """Episodes without an embedded series should use 'Unknown'."""
        record = {"id": 3, "title": "Ep", "seasonNumber": 1, "episodeNumber": 5}
        respx.route(method="GET", host="sonarr", path="/api/v3/wanted/missing").mock(
            return_value=Response(200, json=_wanted([record]))
        )

        provider = SonarrProvider(sonarr_instance(search_mode=SearchMode.MISSING))
        candidates = await provider.get_candidates()

        assert candidates[0].title == "Unknown - S01E05"

    @respx.mock
    @pytest.mark.asyncio
    async def test_search_dispatches_episode_search(self, sonarr_instance: MakeInstance) -> None:
        """search() should send one EpisodeSearch command."""
        route = respx.post("http://sonarr:8989/api/v3/command").mock(
            return_value=Response(201, json={"id": 1})
        )

        await SonarrProvider(sonarr_instance()).search([7])

        assert json.loads(route.calls.last.request.content) == {
            "name": "EpisodeSearch",
            "episodeIds": [7],
        }


class TestCreateProvider:
    """Tests for create_provider()."""

    def test_radarr(self, make_instance: MakeInstance) -> None:
        assert isinstance(create_provider(make_instance(type=InstanceType.RADARR)), RadarrProvider)

    def test_sonarr(self, make_instance: MakeInstance) -> None:
        assert isinstance(create_provider(make_instance(type=InstanceType.SONARR)), SonarrProvider)

    def test_timeout_passed_through(self, make_instance: MakeInstance) -> None:
        provider = create_provider(make_instance(), timeout=5.0)
        assert isinstance(provider, RadarrProvider)
        assert provider.timeout == 5.0
