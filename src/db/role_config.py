"""Catalog row conversion helpers.

`pg_roles.rolconfig` is a `text[]` of `name=value` entries (NULL when the role has no settings).
The lifecycle read path needs a single parameter out of it, so the parsing lives here rather than
in SQL.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

# Parameters whose elements the server re-quotes as identifiers when storing them.
LIST_QUOTED_PARAMETERS = frozenset(
    {
        "search_path",
        "temp_tablespaces",
        "local_preload_libraries",
        "session_preload_libraries",
        "shared_preload_libraries",
    }
)

_SINGLE_QUOTED_IDENTIFIER_RE = re.compile(r'^"(?:[^"]|"")*"$')


def parse_role_config(entries: Iterable[str] | None) -> dict[str, str]:
    """Convert `rolconfig` entries into a `{name: value}` mapping."""

    config: dict[str, str] = {}
    for entry in entries or ():
        name, sep, value = entry.partition("=")
        if not sep:
            continue
        config[name] = value
    return config


def _unquote_list_element(value: str) -> str:
    # A multi-element list (`"a", "b"`) is left exactly as stored.
    if _SINGLE_QUOTED_IDENTIFIER_RE.match(value) is None:
        return value
    return value[1:-1].replace('""', '"')


def find_parameter(entries: Iterable[str] | None, key: str) -> tuple[str, str] | None:
    """Locate `key` in `rolconfig` entries.

    Parameter names are case-insensitive on the server, so the comparison is too; the caller's
    spelling is returned on a match. For list-quoted parameters such as `search_path`, a value
    stored as one double-quoted identifier is unquoted; every other value is returned as stored.
    """

    wanted = key.casefold()
    for name, value in parse_role_config(entries).items():
        if name.casefold() != wanted:
            continue
        if wanted in LIST_QUOTED_PARAMETERS:
            value = _unquote_list_element(value)
        return key, value
    return None
