from __future__ import annotations

from pathlib import Path

import pytest

from consultores_client.domain.session import Session
from consultores_client.infrastructure.state.session_file import FileSessionStore
from consultores_client.infrastructure.state.session_memory import InMemorySessionStore
from consultores_client.runtime.bootstrap import (
    build_runtime,
    close_runtime_resources,
    start_runtime,
)
from consultores_client.runtime.settings import Settings

pytestmark = pytest.mark.anyio("asyncio")


@pytest.fixture(autouse=True)
def _env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("FIREBASE_API_KEY", "key-1")
    monkeypatch.delenv("CONSULTANT_API_BASE_URL", raising=False)
    monkeypatch.delenv("CONSULTORES_SESSION_PERSIST", raising=False)
    monkeypatch.setenv("CONSULTORES_SESSION_FILE", str(tmp_path / "session.json"))


async def test_runtime_restores_persisted_session(tmp_path: Path) -> None:
    FileSessionStore(tmp_path / "session.json").save(
        Session(identifier="a@b.com", access_token="T1", refresh_token="R1", expires_at=2**62)
    )

    runtime = build_runtime()
    try:
        assert isinstance(runtime.session_store, FileSessionStore)
        assert runtime.session_store.path == tmp_path / "session.json"
        assert runtime.session_manager.current_user_identifier == "a@b.com"

        await start_runtime(runtime)

        assert runtime.session_manager.is_authenticated is True
    finally:
        await close_runtime_resources(runtime)


async def test_runtime_without_persistence_uses_memory_store(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONSULTORES_SESSION_PERSIST", "0")

    runtime = build_runtime(Settings.load())
    try:
        assert isinstance(runtime.session_store, InMemorySessionStore)
        await start_runtime(runtime)
        assert runtime.session_manager.is_authenticated is False
    finally:
        await close_runtime_resources(runtime)


async def test_consultant_client_requires_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    runtime = build_runtime()
    assert runtime.consultant_client is None
    with pytest.raises(RuntimeError, match="CONSULTANT_API_BASE_URL"):
        runtime.require_consultant_client()
    await close_runtime_resources(runtime)

    monkeypatch.setenv("CONSULTANT_API_BASE_URL", "https://api.example.com/consultores")
    runtime = build_runtime()
    assert runtime.require_consultant_client() is runtime.consultant_client
    await close_runtime_resources(runtime)


async def test_runtime_builds_without_api_key(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("FIREBASE_API_KEY", "")
    FileSessionStore(tmp_path / "session.json").save(
        Session(identifier="a@b.com", access_token="T1", refresh_token="R1", expires_at=2**62)
    )

    runtime = build_runtime()
    try:
        await start_runtime(runtime)
        runtime.session_manager.logout()

        assert runtime.session_manager.is_authenticated is False
        assert runtime.session_store.load() is None
    finally:
        await close_runtime_resources(runtime)
