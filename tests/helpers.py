"""Test helpers shared across test modules."""

from __future__ import annotations

from seekarr.models.common import CandidateKind, SearchCandidate


class FakeClock:
    """Manually advanced clock with an async sleep that advances it."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeProvider:
    """Provider returning canned candidates and recording search calls."""

    def __init__(
        self,
        candidates: list[SearchCandidate] | None = None,
        *,
        fail_fetch: Exception | None = None,
        fail_batches: set[int] | None = None,
    ) -> None:
        self.candidates = candidates or []
        self.fail_fetch = fail_fetch
        self.fail_batches = fail_batches or set()
        self.search_calls: list[list[int]] = []

    async def get_candidates(self) -> list[SearchCandidate]:
        if self.fail_fetch is not None:
            raise self.fail_fetch
        return list(self.candidates)

    async def search(self, ids: list[int]) -> None:
        self.search_calls.append(list(ids))
        if len(self.search_calls) - 1 in self.fail_batches:
            raise RuntimeError("500 Internal Server Error from /api/v3/command")


def make_candidates(
    count: int, kind: CandidateKind = CandidateKind.MISSING, start: int = 1
) -> list[SearchCandidate]:
    """Build `count` candidates with consecutive ids."""
    return [
        SearchCandidate(id=i, title=f"Item {i}", kind=kind) for i in range(start, start + count)
    ]
