"""Command-line entry point for running one lifecycle operation.

Prints the resulting resource state as a JSON object on stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable, Sequence

import psycopg
from pydantic import ValidationError

from src.app import open_app
from src.config.logging import configure_logging
from src.config.settings import load_settings
from src.db.client import DBConnection
from src.db.transaction import TransactionError
from src.resource.alter_role import (
    AlterRoleError,
    create_alter_role,
    delete_alter_role,
    read_alter_role,
)
from src.resource.schema import RESOURCE_SCHEMA, ResourceData, ResourceStatus, RoleParameterBinding

logger = logging.getLogger(__name__)

_OPERATIONS: dict[str, Callable[[DBConnection, ResourceData], None]] = {
    "create": create_alter_role,
    "read": read_alter_role,
    "delete": delete_alter_role,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Manage one session parameter on a Postgres role (ALTER ROLE ... SET).",
    )
    parser.add_argument("operation", choices=sorted(_OPERATIONS))
    for name, spec in RESOURCE_SCHEMA.items():
        parser.add_argument(
            "--" + name.replace("_", "-"),
            dest=name,
            required=spec.required,
            help=spec.description,
        )
    parser.add_argument("--id", default="", help="Resource id from a previous run, if any.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        binding = RoleParameterBinding.model_validate(
            {name: getattr(args, name) for name in RESOURCE_SCHEMA}
        )
    except ValidationError as exc:
        parser.error(str(exc))

    try:
        settings = load_settings()
    except RuntimeError as exc:
        # Logging is not configured yet.
        print(f"{parser.prog}: {exc}", file=sys.stderr)
        return 1
    configure_logging(settings.log_level)

    data = ResourceData(
        binding=binding,
        id=args.id,
        status=ResourceStatus.present if args.id else ResourceStatus.absent,
    )

    try:
        with open_app(settings) as app:
            _OPERATIONS[args.operation](app.db, data)
    except (AlterRoleError, TransactionError) as exc:
        logger.error("%s failed: %s", args.operation, exc)
        return 1
    except psycopg.OperationalError as exc:
        logger.error("could not connect to Postgres: %s", exc)
        return 1

    print(json.dumps({**data.attributes(), "status": str(data.status)}))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
