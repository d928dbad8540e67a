"""Configuration helpers for client runtime wiring."""

from __future__ import annotations

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from consultores_client.config.consultant_api import ConsultantApiSettings
from consultores_client.config.identity import IdentitySettings
from consultores_client.config.storage import SessionStorageSettings


class Settings(BaseSettings):
    """Client configuration resolved from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    identity: IdentitySettings = Field(default_factory=IdentitySettings)
    consultant_api: ConsultantApiSettings = Field(default_factory=ConsultantApiSettings)
    storage: SessionStorageSettings = Field(default_factory=SessionStorageSettings)

    @property
    def firebase_api_key_value(self) -> str:
        return self.identity.firebase_api_key_value

    # --- Loader ---
    @classmethod
    def load(cls) -> Settings:
        instance = cls()
        logger = logging.getLogger("consultores_client.settings")
        logger.info("client settings loaded: %r", instance)
        return instance


__all__ = ["Settings"]
