"""Server version detection and feature gating."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

import psycopg

_VERSION_RE = re.compile(r"^\s*(\d+)(?:\.(\d+))?(?:\.(\d+))?\s*$")


@dataclass(frozen=True, order=True)
class ServerVersion:
    """A `major.minor.patch` Postgres server version."""

    major: int
    minor: int = 0
    patch: int = 0

    @classmethod
    def from_server_version_num(cls, num: int) -> ServerVersion:
        """Convert libpq's numeric version (`160002`, `90605`) into a `ServerVersion`."""

        if num >= 100_000:
            # Since 10 the number is major * 10000 + minor.
            return cls(num // 10_000, num % 10_000)
        return cls(num // 10_000, num // 100 % 100, num % 100)

    @classmethod
    def parse(cls, text: str) -> ServerVersion:
        match = _VERSION_RE.match(text)
        if match is None:
            raise ValueError(f"invalid Postgres version: {text!r}")
        major, minor, patch = (int(part) if part else 0 for part in match.groups())
        return cls(major, minor, patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


class Feature(StrEnum):
    """Server capabilities gated by version."""

    privileges = "privileges"


_FEATURE_MIN_VERSIONS: dict[Feature, ServerVersion] = {
    Feature.privileges: ServerVersion(9, 0, 0),
}


@dataclass(frozen=True)
class DBConnection:
    """A live connection together with the server version used for feature checks."""

    client: psycopg.Connection
    version: ServerVersion

    @classmethod
    def from_connection(
            cls,
            conn: psycopg.Connection,
            *,
            expected_version: str | None = None,
    ) -> DBConnection:
        """Wrap `conn`, detecting the server version unless `expected_version` is given."""

        if expected_version:
            version = ServerVersion.parse(expected_version)
        else:
            version = ServerVersion.from_server_version_num(conn.info.server_version)
        return cls(client=conn, version=version)

    def feature_supported(self, feature: Feature) -> bool:
        return self.version >= _FEATURE_MIN_VERSIONS[feature]
