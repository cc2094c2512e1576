"""Pydantic models for API responses."""

from seekarr.models.common import CandidateKind, InstanceType, SearchCandidate, SearchMode
from seekarr.models.radarr import Movie, MovieFile
from seekarr.models.sonarr import SeriesRef, WantedEpisode, WantedPage

__all__ = [
    "CandidateKind",
    "InstanceType",
    "Movie",
    "MovieFile",
    "SearchCandidate",
    "SearchMode",
    "SeriesRef",
    "WantedEpisode",
    "WantedPage",
]
