"""Scoped transactions for lifecycle operations.

A transaction is exclusively owned by the operation that started it. `start_transaction` always
rolls back on exit; after a successful `commit()` the rollback is a no-op, so no code path can
return with the transaction still open.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol

import psycopg
from psycopg.pq import TransactionStatus

logger = logging.getLogger(__name__)


class TransactionError(RuntimeError):
    """Raised when a transaction cannot be started or finished."""


class CommitError(TransactionError):
    """Raised when COMMIT fails."""


class QueryAble(Protocol):
    """Anything that can execute a query: a psycopg connection or a `Transaction`."""

    def execute(self, query: Any, params: Any = None, *, prepare: bool | None = None) -> Any: ...


class Transaction:
    """An open transaction on a non-autocommit connection."""

    def __init__(self, conn: psycopg.Connection) -> None:
        self._conn = conn
        self._done = False

    def execute(self, query: Any, params: Any = None, *, prepare: bool | None = None) -> Any:
        if self._done:
            raise TransactionError("transaction has already been committed or rolled back")
        return self._conn.execute(query, params, prepare=prepare)

    def commit(self) -> None:
        if self._done:
            raise TransactionError("transaction has already been committed or rolled back")
        try:
            self._conn.commit()
        except psycopg.Error as exc:
            raise CommitError(f"could not commit transaction: {exc}") from exc
        self._done = True

    def rollback(self) -> None:
        """Roll back unless already finished."""

        if self._done:
            return
        self._done = True
        self._conn.rollback()


@contextmanager
def start_transaction(conn: psycopg.Connection) -> Iterator[Transaction]:
    """Start a transaction and guarantee it is rolled back unless committed."""

    if conn.closed:
        raise TransactionError("could not start transaction: connection is closed")
    if conn.autocommit:
        raise TransactionError("could not start transaction: connection is in autocommit mode")
    status = conn.info.transaction_status
    if status != TransactionStatus.IDLE:
        raise TransactionError(f"could not start transaction: connection is {status.name}")

    txn = Transaction(conn)
    try:
        yield txn
    finally:
        try:
            txn.rollback()
        except psycopg.Error:
            # Do not mask the exception that is already propagating.
            logger.exception("could not roll back transaction")
