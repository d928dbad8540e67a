"""Consultant backend connectivity settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from consultores_client.clients import CONSULTANT_API


class ConsultantApiSettings(BaseSettings):
    """Resource URL and timeout for consultant CRUD calls."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    base_url: str | None = Field(default=None, alias="CONSULTANT_API_BASE_URL")
    timeout_seconds: float = Field(
        default=CONSULTANT_API.timeout_seconds, alias="CONSULTANT_API_TIMEOUT_SECONDS", gt=0
    )


__all__ = ["ConsultantApiSettings"]
