"""Safe DB query helpers.

Queries are always parameterized; values are passed via `params` and never interpolated into SQL.
"""

from __future__ import annotations

from typing import Any, LiteralString, cast

from src.db.transaction import QueryAble


def fetch_one(db: QueryAble, sql: str, params: tuple[Any, ...] = ()) -> tuple[Any, ...] | None:
    """Execute a query and return its first row, or `None` if it yields no rows.

    DB errors are not swallowed (caller decides how to handle them).
    """

    cur = db.execute(cast(LiteralString, sql), params, prepare=False)
    return cur.fetchone()
