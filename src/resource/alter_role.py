"""Create / read / delete for a role parameter binding.

Create runs `RESET` then `SET` in one transaction so the parameter is never left half applied;
delete runs `RESET` alone. Reads never fail on a missing role or parameter: that is reported by
moving the resource to `absent` and clearing its id, which the reconciliation loop treats as
"needs to be created".
"""

from __future__ import annotations

import logging

import psycopg
from psycopg import sql

from src.db.client import DBConnection, Feature
from src.db.query import fetch_one
from src.db.role_config import find_parameter
from src.db.transaction import QueryAble, Transaction, start_transaction
from src.resource.identity import generate_alter_role_id
from src.resource.schema import ResourceData, ResourceStatus, RoleParameterBinding
from src.sql.builder import build_reset_statement, build_role_config_query, build_set_statement

logger = logging.getLogger(__name__)


class AlterRoleError(RuntimeError):
    """Base class for lifecycle failures."""


class UnsupportedFeatureError(AlterRoleError):
    """Raised when the server version does not support the resource."""


class StatementExecutionError(AlterRoleError):
    """Raised when SET or RESET fails on the server."""


class ReadError(AlterRoleError):
    """Raised when the catalog query fails for a reason other than "no rows"."""


def _require_privileges(db: DBConnection) -> None:
    if not db.feature_supported(Feature.privileges):
        raise UnsupportedFeatureError(
            "postgresql_alter_role resource is not supported for this Postgres version "
            f"({db.version})"
        )


def _execute(txn: Transaction, statement: sql.Composed, description: str) -> None:
    logger.debug("executing %s query for role parameter", description)
    try:
        txn.execute(statement, prepare=False)
    except psycopg.Error as exc:
        raise StatementExecutionError(f"could not execute {description} query: {exc}") from exc


def _reset_alter_role(txn: Transaction, binding: RoleParameterBinding) -> None:
    _execute(
        txn,
        build_reset_statement(binding.role_name, binding.parameter_key),
        "alter reset",
    )


def _alter_role(txn: Transaction, binding: RoleParameterBinding) -> None:
    _execute(
        txn,
        build_set_statement(binding.role_name, binding.parameter_key, binding.parameter_value),
        "alter",
    )


def _mark_absent(data: ResourceData) -> None:
    data.id = ""
    data.status = ResourceStatus.absent


def _read_alter_role(db: QueryAble, data: ResourceData) -> None:
    binding = data.binding
    query = build_role_config_query(binding.role_name)
    try:
        row = fetch_one(db, query.sql, query.params)
    except psycopg.Error as exc:
        raise ReadError(f"error reading alter role: {exc}") from exc

    found = None
    if row is not None:
        role_name, role_config = row
        found = find_parameter(role_config, binding.parameter_key)

    if found is None:
        logger.warning("PostgreSQL alter role (%r) not found", data.id)
        _mark_absent(data)
        return

    parameter_key, parameter_value = found
    data.binding = RoleParameterBinding(
        role_name=role_name,
        parameter_key=parameter_key,
        parameter_value=parameter_value,
    )
    data.id = generate_alter_role_id(role_name, parameter_key, parameter_value)
    data.status = ResourceStatus.present


def create_alter_role(db: DBConnection, data: ResourceData) -> None:
    """Apply the binding (`RESET` + `SET`, one transaction) and refresh it from the catalog."""

    _require_privileges(db)

    binding = data.binding
    data.status = ResourceStatus.pending
    try:
        with start_transaction(db.client) as txn:
            # Clear any pre-existing value before setting it again.
            _reset_alter_role(txn, binding)
            _alter_role(txn, binding)
            txn.commit()
    except Exception:
        data.status = ResourceStatus.absent
        raise

    data.id = generate_alter_role_id(
        binding.role_name,
        binding.parameter_key,
        binding.parameter_value,
    )
    data.status = ResourceStatus.present

    with start_transaction(db.client) as txn:
        _read_alter_role(txn, data)

    if data.status == ResourceStatus.absent:
        logger.warning(
            "role parameter %r on role %r was committed but is missing from the catalog",
            binding.parameter_key,
            binding.role_name,
        )


def read_alter_role(db: DBConnection, data: ResourceData) -> None:
    """Refresh `data` from `pg_roles`; a missing binding moves it to `absent`."""

    _require_privileges(db)

    # Read-only: the scope rolls the snapshot back on exit.
    with start_transaction(db.client) as txn:
        _read_alter_role(txn, data)


def delete_alter_role(db: DBConnection, data: ResourceData) -> None:
    """Remove the parameter from the role with `RESET`.

    On failure the status is left unchanged. The id is cleared by the caller.
    """

    _require_privileges(db)

    with start_transaction(db.client) as txn:
        _reset_alter_role(txn, data.binding)
        txn.commit()

    data.status = ResourceStatus.absent
