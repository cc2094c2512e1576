"""API clients for Radarr and Sonarr."""

from seekarr.clients.base import (
    ArrClientError,
    ArrConnectionError,
    ArrHTTPError,
    BaseArrClient,
)
from seekarr.clients.radarr import RadarrClient
from seekarr.clients.sonarr import SonarrClient

__all__ = [
    "ArrClientError",
    "ArrConnectionError",
    "ArrHTTPError",
    "BaseArrClient",
    "RadarrClient",
    "SonarrClient",
]
