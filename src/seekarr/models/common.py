"""Common models shared between Radarr and Sonarr."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class InstanceType(str, Enum):
    """Kind of backend an instance talks to."""

    SONARR = "sonarr"
    RADARR = "radarr"


class SearchMode(str, Enum):
    """Which candidate kinds an instance searches for."""

    MISSING = "missing"
    UPGRADES = "upgrades"
    BOTH = "both"

    @property
    def includes_missing(self) -> bool:
        """Whether items without a file are searched."""
        return self in (SearchMode.MISSING, SearchMode.BOTH)

    @property
    def includes_upgrades(self) -> bool:
        """Whether items below the quality cutoff are searched."""
        return self in (SearchMode.UPGRADES, SearchMode.BOTH)


class CandidateKind(str, Enum):
    """Why an item is eligible for a search."""

    MISSING = "missing"
    UPGRADE = "upgrade"


class SearchCandidate(BaseModel):
    """An item eligible to be searched for.

    The id is only meaningful within the instance that produced it.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    kind: CandidateKind
