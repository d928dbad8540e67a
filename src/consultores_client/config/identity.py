"""Identity service connectivity settings."""

from __future__ import annotations

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from consultores_client.clients import IDENTITY_TOOLKIT, SECURE_TOKEN


class IdentitySettings(BaseSettings):
    """API key and endpoints for sign-in and token refresh."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    firebase_api_key: SecretStr = Field(default=SecretStr(""), alias="FIREBASE_API_KEY")
    identity_toolkit_base_url: str = Field(
        default=IDENTITY_TOOLKIT.base_url, alias="IDENTITY_TOOLKIT_BASE_URL"
    )
    secure_token_base_url: str = Field(default=SECURE_TOKEN.base_url, alias="SECURE_TOKEN_BASE_URL")
    timeout_seconds: float = Field(
        default=IDENTITY_TOOLKIT.timeout_seconds, alias="IDENTITY_TIMEOUT_SECONDS", gt=0
    )

    @property
    def firebase_api_key_value(self) -> str:
        return self.firebase_api_key.get_secret_value().strip()


__all__ = ["IdentitySettings"]
