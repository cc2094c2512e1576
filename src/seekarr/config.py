"""Configuration loading for seekarr."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Self

from seekarr.models.common import InstanceType, SearchMode

VALID_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")

DEFAULT_TIMEOUT = 120.0
DEFAULT_INTERVAL_MINUTES = 60


class ConfigurationError(Exception):
    """Raised when configuration is invalid or missing."""


@dataclass(frozen=True)
class InstanceConfig:
    """One Radarr or Sonarr instance to search."""

    name: str
    type: InstanceType
    url: str
    api_key: str
    search_mode: SearchMode = SearchMode.BOTH
    monitored_only: bool = True
    search_limit: int = 10
    rate_limit_per_minute: int = 5
    dry_run: bool = False
    search_frequency_hours: float = 0

    @property
    def history_enabled(self) -> bool:
        """Whether recently searched items are tracked and skipped."""
        return self.search_frequency_hours > 0


@dataclass
class ScheduleConfig:
    """How often every instance is run. An interval of 0 means run once."""

    interval_minutes: int = DEFAULT_INTERVAL_MINUTES


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"


def _default_config_path() -> Path:
    """Get the default config file path."""
    return Path.home() / ".config" / "seekarr" / "config.toml"


def _default_data_dir() -> Path:
    """Get the default directory for search history files."""
    return Path.home() / ".local" / "share" / "seekarr"


# --- Helper functions for parsing config sections ---


def _require(inst: dict[str, Any], key: str, index: int) -> Any:
    value = inst.get(key)
    if value is None or value == "":
        raise ConfigurationError(f"Instance {index} missing '{key}'")
    return value


def _parse_int(value: Any, what: str, *, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{what} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigurationError(f"{what} must be >= {minimum}, got {value}")
    return value


def _parse_bool(value: Any, what: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{what} must be true or false, got {value!r}")
    return value


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    """Get an optional top-level table, which must be a table when present."""
    section = data.get(key, {})
    if not isinstance(section, dict):
        raise ConfigurationError(f"'{key}' must be a table, got {section!r}")
    return section


def _parse_instance(inst: Any, index: int) -> InstanceConfig:
    """Parse and validate one entry of the instances array.

    Args:
        inst: The raw TOML table for the instance
        index: Position in the instances array, used in error messages

    Returns:
        InstanceConfig with defaults applied

    Raises:
        ConfigurationError: If a required field is missing or a value is invalid
    """
    if not isinstance(inst, dict):
        raise ConfigurationError(f"Instance {index} must be a table")

    name = str(_require(inst, "name", index))
    type_value = _require(inst, "type", index)
    url = str(_require(inst, "url", index))
    api_key = str(_require(inst, "api_key", index))

    try:
        instance_type = InstanceType(type_value)
    except ValueError:
        raise ConfigurationError(
            f"Instance {index} has invalid type '{type_value}', must be 'sonarr' or 'radarr'"
        ) from None

    defaults = InstanceConfig(name=name, type=instance_type, url=url, api_key=api_key)

    mode_value = inst.get("search_mode", defaults.search_mode.value)
    try:
        search_mode = SearchMode(mode_value)
    except ValueError:
        raise ConfigurationError(
            f"Instance {index} has invalid search_mode '{mode_value}'"
        ) from None

    frequency = inst.get("search_frequency_hours", defaults.search_frequency_hours)
    if isinstance(frequency, bool) or not isinstance(frequency, (int, float)):
        raise ConfigurationError(
            f"Instance {index} search_frequency_hours must be a number, got {frequency!r}"
        )

    return replace(
        defaults,
        search_mode=search_mode,
        monitored_only=_parse_bool(
            inst.get("monitored_only", defaults.monitored_only),
            f"Instance {index} monitored_only",
        ),
        search_limit=_parse_int(
            inst.get("search_limit", defaults.search_limit),
            f"Instance {index} search_limit",
            minimum=1,
        ),
        rate_limit_per_minute=_parse_int(
            inst.get("rate_limit_per_minute", defaults.rate_limit_per_minute),
            f"Instance {index} rate_limit_per_minute",
            minimum=1,
        ),
        dry_run=_parse_bool(inst.get("dry_run", defaults.dry_run), f"Instance {index} dry_run"),
        search_frequency_hours=float(frequency),
    )


def _parse_instances_from_dict(data: dict[str, Any]) -> list[InstanceConfig]:
    """Parse the instances array.

    Args:
        data: The full config dictionary

    Returns:
        List of validated InstanceConfig

    Raises:
        ConfigurationError: If the array is absent, empty, or has duplicate names
    """
    raw = data.get("instances")
    if not isinstance(raw, list):
        raise ConfigurationError("Config must contain an 'instances' array")
    if not raw:
        raise ConfigurationError("Config must contain at least one instance")

    instances = [_parse_instance(inst, i) for i, inst in enumerate(raw)]

    # Names key the history files, so they must not collide
    seen: set[str] = set()
    for inst in instances:
        if inst.name in seen:
            raise ConfigurationError(f"Duplicate instance name '{inst.name}'")
        seen.add(inst.name)

    return instances


def _parse_schedule_from_dict(data: dict[str, Any]) -> ScheduleConfig:
    """Parse ScheduleConfig from a config dictionary.

    Args:
        data: The full config dictionary

    Returns:
        ScheduleConfig instance
    """
    schedule_data = _section(data, "schedule")
    interval = schedule_data.get("interval_minutes", DEFAULT_INTERVAL_MINUTES)
    return ScheduleConfig(
        interval_minutes=_parse_int(interval, "schedule.interval_minutes", minimum=0)
    )


def _parse_logging_from_dict(data: dict[str, Any]) -> LoggingConfig:
    """Parse LoggingConfig from a config dictionary.

    Args:
        data: The full config dictionary

    Returns:
        LoggingConfig instance
    """
    logging_data = _section(data, "logging")
    if "level" not in logging_data:
        return LoggingConfig()
    return LoggingConfig(level=validate_log_level(str(logging_data["level"])))


def validate_log_level(level: str) -> str:
    """Normalize a log level name.

    Args:
        level: Level name in any case (e.g., "DEBUG", "info")

    Returns:
        The lower-cased level name

    Raises:
        ConfigurationError: If the level is not a known logging level
    """
    normalized = level.strip().lower()
    if normalized not in VALID_LOG_LEVELS:
        raise ConfigurationError(
            f"Invalid log level '{level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )
    return normalized


def log_level_to_int(level: str) -> int:
    """Convert a validated level name to its logging constant."""
    return logging.getLevelName(validate_log_level(level).upper())  # type: ignore[no-any-return]


@dataclass
class Config:
    """Application configuration."""

    instances: list[InstanceConfig] = field(default_factory=list)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    data_dir: Path = field(default_factory=_default_data_dir)
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def load(cls, path: Path | None = None) -> Self:
        """Load configuration from a config file and environment.

        Configuration precedence (highest to lowest):
        1. Environment variables
        2. Config file

        The config file is `path` if given, else $SEEKARR_CONFIG_PATH, else
        ~/.config/seekarr/config.toml. Unlike the other settings, instances
        can only come from the file.

        Environment variables:
        - SEEKARR_CONFIG_PATH (config file location)
        - SEEKARR_DATA_PATH (directory for search history files)
        - SEEKARR_INTERVAL_MINUTES (0 = run once)
        - SEEKARR_TIMEOUT (request timeout in seconds)
        - SEEKARR_LOG_LEVEL

        Returns:
            Config instance with loaded values

        Raises:
            ConfigurationError: If the file is missing or invalid
        """
        if path is None:
            env_path = os.environ.get("SEEKARR_CONFIG_PATH")
            path = Path(env_path).expanduser() if env_path else _default_config_path()

        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")

        config = cls._load_from_file(path)
        return cls._load_from_env(config)

    @classmethod
    def _load_from_file(cls, path: Path) -> Self:
        """Load configuration from TOML file.

        Args:
            path: Path to the TOML config file

        Returns:
            Config instance

        Raises:
            ConfigurationError: If file cannot be parsed or fails validation
        """
        data = _load_toml_file(path)

        data_dir = _default_data_dir()
        if "data_dir" in data:
            if not isinstance(data["data_dir"], str):
                raise ConfigurationError(
                    f"data_dir must be a path string, got {data['data_dir']!r}"
                )
            data_dir = Path(data["data_dir"]).expanduser()

        try:
            timeout = float(data.get("timeout", DEFAULT_TIMEOUT))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"timeout must be a number: {e}") from e

        return cls(
            instances=_parse_instances_from_dict(data),
            schedule=_parse_schedule_from_dict(data),
            logging=_parse_logging_from_dict(data),
            data_dir=data_dir,
            timeout=timeout,
        )

    @classmethod
    def _load_from_env(cls, base: Self) -> Self:
        """Override configuration with environment variables.

        Args:
            base: Base config to override

        Returns:
            Config instance with environment overrides
        """
        data_path = os.environ.get("SEEKARR_DATA_PATH")
        data_dir = Path(data_path).expanduser() if data_path else base.data_dir

        timeout_str = os.environ.get("SEEKARR_TIMEOUT")
        timeout = base.timeout
        if timeout_str:
            try:
                timeout = float(timeout_str)
            except ValueError:
                raise ConfigurationError(
                    f"SEEKARR_TIMEOUT must be a number, got {timeout_str!r}"
                ) from None

        schedule = base.schedule
        interval_str = os.environ.get("SEEKARR_INTERVAL_MINUTES")
        if interval_str:
            try:
                interval = int(interval_str)
            except ValueError:
                raise ConfigurationError(
                    f"SEEKARR_INTERVAL_MINUTES must be an integer, got {interval_str!r}"
                ) from None
            schedule = ScheduleConfig(
                interval_minutes=_parse_int(interval, "SEEKARR_INTERVAL_MINUTES", minimum=0)
            )

        logging_config = base.logging
        level_str = os.environ.get("SEEKARR_LOG_LEVEL")
        if level_str:
            logging_config = LoggingConfig(level=validate_log_level(level_str))

        return cls(
            instances=base.instances,
            schedule=schedule,
            logging=logging_config,
            data_dir=data_dir,
            timeout=timeout,
        )

    def get_instance(self, name: str) -> InstanceConfig:
        """Get an instance by name.

        Raises:
            ConfigurationError: If no instance has that name
        """
        for inst in self.instances:
            if inst.name == name:
                return inst
        raise ConfigurationError(f"No instance named '{name}' in config")


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load and parse a TOML file.

    Args:
        path: Path to the TOML file

    Returns:
        Parsed TOML data as dictionary

    Raises:
        ConfigurationError: If file cannot be parsed
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid config file: {e}") from e
