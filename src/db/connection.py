"""Shared Postgres connection helpers.

Lifecycle operations own their transactions explicitly, so every connection is opened with
autocommit disabled.
"""

from __future__ import annotations

import psycopg


def connect(database_url: str, *, connect_timeout: int | None = None) -> psycopg.Connection:
    """Connect to Postgres with autocommit disabled.

    Statement and connect timeouts are left to libpq; `connect_timeout` is passed through as-is.
    """

    kwargs: dict[str, int] = {}
    if connect_timeout:
        kwargs["connect_timeout"] = connect_timeout
    return psycopg.connect(database_url, autocommit=False, **kwargs)
