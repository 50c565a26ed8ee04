"""Application composition root.

This module wires together configuration and the database connection for the command line.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from src.config.settings import Settings
from src.db.client import DBConnection
from src.db.connection import connect


@dataclass(frozen=True)
class App:
    """Shared dependencies for lifecycle operations."""

    settings: Settings
    db: DBConnection


@contextmanager
def open_app(settings: Settings) -> Iterator[App]:
    """Connect to Postgres and yield the application container; the connection is closed on exit."""

    with connect(settings.database_url, connect_timeout=settings.connect_timeout) as conn:
        db = DBConnection.from_connection(conn, expected_version=settings.expected_version)
        yield App(settings=settings, db=db)
