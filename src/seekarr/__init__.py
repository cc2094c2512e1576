"""seekarr - Keep Radarr/Sonarr searching for missing and upgradable items.

Polls one or more Radarr (movies) and Sonarr (episodes) instances, finds
items that have no file or whose file is below the quality cutoff, and asks
the backend to search for a random, rate-limited subset of them on every run.
Items searched recently are skipped until their frequency window expires.

Quick Start
-----------
Run one pass over an instance::

    from seekarr import InstanceConfig, SearchExecutor, create_provider
    from seekarr.models import InstanceType

    inst = InstanceConfig(
        name="radarr",
        type=InstanceType.RADARR,
        url="http://localhost:7878",
        api_key="your-api-key",
    )
    executor = SearchExecutor(inst, create_provider(inst))
    record = await executor.run()
    print(record.status, record.searched_ids)

CLI Usage
---------
::

    seekarr validate
    seekarr run --once --dry-run
    seekarr run
    seekarr history radarr

Classes
-------
SearchExecutor
    Runs one discover/filter/sample/dispatch pass for an instance.
RadarrProvider, SonarrProvider
    Candidate discovery and search dispatch per backend.
JsonSearchHistoryStore
    Per-instance record of when items were last searched.
RateLimiter
    Sliding-window limiter for search commands.
"""

from seekarr.config import Config, ConfigurationError, InstanceConfig
from seekarr.providers import RadarrProvider, SonarrProvider, create_provider
from seekarr.rate_limiter import RateLimiter
from seekarr.scheduler import RunRecord, RunStatus, SearchExecutor, build_executors
from seekarr.state import JsonSearchHistoryStore

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConfigurationError",
    "InstanceConfig",
    "JsonSearchHistoryStore",
    "RadarrProvider",
    "RateLimiter",
    "RunRecord",
    "RunStatus",
    "SearchExecutor",
    "SonarrProvider",
    "__version__",
    "build_executors",
    "create_provider",
]
