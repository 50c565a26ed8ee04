"""Pytest configuration.

The repository uses a flat `src/` layout. This conftest ensures tests can import from the `src.*`
namespace when running `pytest` without installing the package, and provides an in-memory stand-in
for a psycopg connection that models transactions over a tiny `pg_roles` catalog.
"""

from __future__ import annotations

import copy
import re
import sys
from pathlib import Path
from typing import Any

import psycopg
import pytest
from psycopg.pq import TransactionStatus

# Ensure `import src...` works when running pytest without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from src.db.client import DBConnection  # noqa: E402

_IDENT = r'"((?:[^"]|"")*)"'
_ALTER_ROLE_RE = re.compile(
    rf"^ALTER ROLE {_IDENT} (SET|RESET) {_IDENT}(?: TO {_IDENT})?$"
)


def _unescape(value: str | None) -> str | None:
    return None if value is None else value.replace('""', '"')


class FakeCursor:
    def __init__(self, row: tuple[Any, ...] | None) -> None:
        self._row = row

    def fetchone(self) -> tuple[Any, ...] | None:
        return self._row


class FakeInfo:
    def __init__(self, conn: FakeConnection, server_version: int) -> None:
        self._conn = conn
        self.server_version = server_version

    @property
    def transaction_status(self) -> TransactionStatus:
        return self._conn.status


class FakeConnection:
    """Non-autocommit connection over `{role: {parameter: value}}`.

    Changes made inside a transaction only reach `roles` on commit. `fail_on` makes any statement
    containing that text raise, `fail_commit` makes COMMIT raise.
    """

    def __init__(
            self,
            roles: dict[str, dict[str, str]] | None = None,
            *,
            server_version: int = 160002,
            fail_on: str | None = None,
            fail_commit: bool = False,
    ) -> None:
        self.roles = copy.deepcopy(roles or {})
        self.info = FakeInfo(self, server_version)
        self.status = TransactionStatus.IDLE
        self.autocommit = False
        self.closed = False
        self.fail_on = fail_on
        self.fail_commit = fail_commit
        self.statements: list[str] = []
        self.commits = 0
        self.rollbacks = 0
        self._pending: dict[str, dict[str, str]] = {}

    def execute(self, query: Any, params: Any = None, *, prepare: bool | None = None) -> FakeCursor:
        text = query if isinstance(query, str) else query.as_string()
        self.statements.append(text)

        if self.status == TransactionStatus.INERROR:
            raise psycopg.errors.InFailedSqlTransaction("current transaction is aborted")
        if self.status == TransactionStatus.IDLE:
            self._pending = copy.deepcopy(self.roles)
            self.status = TransactionStatus.INTRANS

        if self.fail_on and self.fail_on in text:
            self.status = TransactionStatus.INERROR
            raise psycopg.errors.InvalidParameterValue(f"injected failure on {self.fail_on!r}")

        match = _ALTER_ROLE_RE.match(text)
        if match:
            role, action, key, value = (_unescape(g) for g in match.groups())
            if role not in self._pending:
                self.status = TransactionStatus.INERROR
                raise psycopg.errors.UndefinedObject(f'role "{role}" does not exist')
            if action == "SET":
                self._pending[role][key] = value
            else:
                self._pending[role].pop(key, None)
            return FakeCursor(None)

        if "pg_catalog.pg_roles" in text:
            (role,) = params
            if role not in self._pending:
                return FakeCursor(None)
            config = [f"{k}={v}" for k, v in self._pending[role].items()] or None
            return FakeCursor((role, config))

        raise AssertionError(f"unexpected statement: {text}")

    def commit(self) -> None:
        if self.fail_commit:
            self.status = TransactionStatus.INERROR
            raise psycopg.OperationalError("server closed the connection unexpectedly")
        if self.status != TransactionStatus.IDLE:
            self.roles = self._pending
            self.commits += 1
        self.status = TransactionStatus.IDLE

    def rollback(self) -> None:
        if self.status != TransactionStatus.IDLE:
            self.rollbacks += 1
        self._pending = {}
        self.status = TransactionStatus.IDLE

    @property
    def writes(self) -> list[str]:
        return [s for s in self.statements if s.startswith("ALTER ROLE")]


@pytest.fixture
def fake_conn() -> FakeConnection:
    return FakeConnection({"alice": {}, "bob": {"work_mem": "64MB"}})


@pytest.fixture
def db(fake_conn: FakeConnection) -> DBConnection:
    return DBConnection.from_connection(fake_conn)  # type: ignore[arg-type]
