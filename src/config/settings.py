"""Environment configuration and validation.

This module defines strongly-typed settings loaded from environment variables (optionally via a
local `.env` file).
"""

from __future__ import annotations

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.config.logging import resolve_log_level
from src.db.client import ServerVersion


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = Field(alias="DATABASE_URL")
    connect_timeout: int = Field(default=30, ge=0, alias="PG_CONNECT_TIMEOUT")
    expected_version: str | None = Field(default=None, alias="PG_EXPECTED_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("expected_version")
    @classmethod
    def validate_expected_version(cls, value: str | None) -> str | None:
        """Normalize the expected server version to `major.minor.patch`.

        When set, it replaces version detection for feature checks.
        """

        if not value:
            return None
        return str(ServerVersion.parse(value))

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Reject level names `logging` does not know."""

        resolve_log_level(value)
        return value.upper()


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is missing or invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
