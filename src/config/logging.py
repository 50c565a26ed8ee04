"""Logging configuration for the command line.

Stdout carries the JSON resource state, so log records always go to stderr.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO


def resolve_log_level(level: str | None = None) -> int:
    """Map a level name (argument, then `LOG_LEVEL`, then INFO) to a `logging` level."""

    name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level: {name!r}")
    return resolved


def configure_logging(level: str | None = None, *, stream: TextIO | None = None) -> None:
    """Configure Python logging for the process."""

    log_level = resolve_log_level(level)
    logging.basicConfig(
        level=log_level,
        stream=stream or sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # Driver internals only when explicitly debugging.
    driver_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    logging.getLogger("psycopg").setLevel(driver_level)
