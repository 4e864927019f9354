"""Logging configuration for the command-line entrypoints."""

from __future__ import annotations

import logging

from .exceptions import ConfigError

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Apply `level` (e.g. "DEBUG") to the root logger."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ConfigError(f"Unknown log level: {level!r}")
    logging.basicConfig(level=numeric, format=_FORMAT)
    logging.getLogger("ignitia_search").setLevel(numeric)
