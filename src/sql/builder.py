"""Deterministic SQL builder for role parameter statements.

Every operand of `ALTER ROLE` is escaped with `psycopg.sql.Identifier`. That includes the parameter
value: it is sent as a quoted identifier (`TO "public"`), not as a string literal, which the server
accepts for `SET` and which keeps mixed case and spaces intact.

Building never fails; invalid names surface when the statement executes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from psycopg import sql


@dataclass(frozen=True)
class BuiltQuery:
    """A parameterized SQL query ready for execution."""

    sql: str
    params: tuple[Any, ...]


def build_set_statement(role_name: str, parameter_key: str, parameter_value: str) -> sql.Composed:
    """`ALTER ROLE <role> SET <key> TO <value>`."""

    return sql.SQL("ALTER ROLE {} SET {} TO {}").format(
        sql.Identifier(role_name),
        sql.Identifier(parameter_key),
        sql.Identifier(parameter_value),
    )


def build_reset_statement(role_name: str, parameter_key: str) -> sql.Composed:
    """`ALTER ROLE <role> RESET <key>`."""

    return sql.SQL("ALTER ROLE {} RESET {}").format(
        sql.Identifier(role_name),
        sql.Identifier(parameter_key),
    )


def build_role_config_query(role_name: str) -> BuiltQuery:
    """Look up a role's name and full `rolconfig` array by role name."""

    return BuiltQuery(
        sql=(
            "SELECT rolname, rolconfig"
            "  FROM pg_catalog.pg_roles"
            " WHERE rolname = %s"
        ),
        params=(role_name,),
    )
