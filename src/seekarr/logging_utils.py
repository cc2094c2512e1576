"""Logging setup and instance-tagged loggers."""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

from seekarr.config import log_level_to_int

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def configure_logging(level: str = "info") -> None:
    """Configure root logging for the seekarr process.

    Replaces any handlers installed by a previous call, so it is safe to call
    once per CLI invocation.

    Args:
        level: Log level name (debug, info, warning, error, critical)
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_seekarr", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._seekarr = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(log_level_to_int(level))

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


class InstanceLogger(logging.LoggerAdapter):  # type: ignore[type-arg]
    """Logger adapter that tags every message with an instance name.

    Messages are prefixed with ``[<instance>]`` and the name is also attached
    to the record as ``record.instance``.
    """

    def __init__(self, logger: logging.Logger, instance: str) -> None:
        super().__init__(logger, {"instance": instance})
        self.instance = instance

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("instance", self.instance)
        kwargs["extra"] = extra
        return f"[{self.instance}] {msg}", kwargs
