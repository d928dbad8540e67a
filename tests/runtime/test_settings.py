from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from consultores_client.clients import IDENTITY_TOOLKIT, SECURE_TOKEN
from consultores_client.config.storage import DEFAULT_SESSION_FILE
from consultores_client.runtime.settings import Settings

_ENV_VARS = (
    "FIREBASE_API_KEY",
    "IDENTITY_TOOLKIT_BASE_URL",
    "SECURE_TOKEN_BASE_URL",
    "IDENTITY_TIMEOUT_SECONDS",
    "CONSULTANT_API_BASE_URL",
    "CONSULTANT_API_TIMEOUT_SECONDS",
    "CONSULTORES_SESSION_FILE",
    "CONSULTORES_SESSION_PERSIST",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of the resolved settings.
    monkeypatch.chdir(tmp_path)


def test_settings_loads_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("FIREBASE_API_KEY", "  key-1 ")
    monkeypatch.setenv("CONSULTANT_API_BASE_URL", "https://api.example.com/consultores")
    monkeypatch.setenv("CONSULTANT_API_TIMEOUT_SECONDS", "4.5")
    monkeypatch.setenv("CONSULTORES_SESSION_FILE", str(tmp_path / "session.json"))
    monkeypatch.setenv("CONSULTORES_SESSION_PERSIST", "false")

    settings = Settings.load()

    assert settings.firebase_api_key_value == "key-1"
    assert settings.consultant_api.base_url == "https://api.example.com/consultores"
    assert settings.consultant_api.timeout_seconds == 4.5
    assert settings.storage.session_file == tmp_path / "session.json"
    assert settings.storage.persist is False


def test_settings_defaults() -> None:
    settings = Settings.load()

    assert settings.firebase_api_key_value == ""
    assert settings.identity.identity_toolkit_base_url == IDENTITY_TOOLKIT.base_url
    assert settings.identity.secure_token_base_url == SECURE_TOKEN.base_url
    assert settings.consultant_api.base_url is None
    assert settings.storage.session_file == DEFAULT_SESSION_FILE
    assert settings.storage.persist is True


def test_settings_reads_dotenv_file(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("FIREBASE_API_KEY=from-dotenv\n", encoding="utf-8")

    assert Settings.load().firebase_api_key_value == "from-dotenv"


def test_api_key_is_masked_in_repr(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FIREBASE_API_KEY", "key-1")

    assert "key-1" not in repr(Settings.load())


def test_non_positive_timeout_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IDENTITY_TIMEOUT_SECONDS", "0")

    with pytest.raises(ValidationError):
        Settings.load()
