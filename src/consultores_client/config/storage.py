"""Local session persistence settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from consultores_client.infrastructure.state.session_file import SESSION_STORAGE_KEY

DEFAULT_SESSION_FILE = Path.home() / ".consultores" / f"{SESSION_STORAGE_KEY}.json"


class SessionStorageSettings(BaseSettings):
    """Where (and whether) the session survives process restarts."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    session_file: Path = Field(default=DEFAULT_SESSION_FILE, alias="CONSULTORES_SESSION_FILE")
    persist: bool = Field(default=True, alias="CONSULTORES_SESSION_PERSIST")


__all__ = ["DEFAULT_SESSION_FILE", "SessionStorageSettings"]
