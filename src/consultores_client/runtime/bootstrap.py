"""Runtime wiring for the consultant client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from consultores_client.application.ports.session_store import SessionStorePort
from consultores_client.application.session_manager import SessionManager
from consultores_client.infrastructure.api.consultant_client import HttpConsultantClient
from consultores_client.infrastructure.identity.client import IdentityToolkitClient
from consultores_client.infrastructure.state.session_file import FileSessionStore
from consultores_client.infrastructure.state.session_memory import InMemorySessionStore
from consultores_client.runtime.settings import Settings

logger = logging.getLogger("consultores_client.runtime")


@dataclass(frozen=True, slots=True)
class RuntimeContext:
    """Aggregated runtime components shared across CLI commands."""

    settings: Settings
    session_store: SessionStorePort
    identity_client: IdentityToolkitClient
    session_manager: SessionManager
    consultant_client: HttpConsultantClient | None

    def require_consultant_client(self) -> HttpConsultantClient:
        if self.consultant_client is None:
            raise RuntimeError("CONSULTANT_API_BASE_URL must be set to manage consultants")
        return self.consultant_client


def build_runtime(settings: Settings | None = None) -> RuntimeContext:
    """Construct the runtime context; the stored session is read exactly once here."""
    resolved = settings or Settings.load()

    session_store = _build_session_store(resolved)
    identity_client = IdentityToolkitClient(
        api_key=resolved.firebase_api_key_value,
        identity_base_url=resolved.identity.identity_toolkit_base_url,
        secure_token_base_url=resolved.identity.secure_token_base_url,
        timeout=resolved.identity.timeout_seconds,
    )
    session_manager = SessionManager(
        store=session_store,
        issuer=identity_client,
        refresher=identity_client,
    )
    consultant_client = None
    if resolved.consultant_api.base_url:
        consultant_client = HttpConsultantClient(
            base_url=resolved.consultant_api.base_url,
            tokens=session_manager,
            timeout=resolved.consultant_api.timeout_seconds,
        )
    logger.debug(
        "runtime built",
        extra={
            "data": {
                "persist_session": resolved.storage.persist,
                "consultant_api_configured": consultant_client is not None,
            }
        },
    )
    return RuntimeContext(
        settings=resolved,
        session_store=session_store,
        identity_client=identity_client,
        session_manager=session_manager,
        consultant_client=consultant_client,
    )


async def start_runtime(runtime: RuntimeContext) -> None:
    """Validate a restored session before any command uses it."""
    await runtime.session_manager.ensure_session_validity()


async def close_runtime_resources(runtime: RuntimeContext) -> None:
    """Close the HTTP clients owned by the runtime."""

    async def _aclose(obj: _SupportsAclose | None) -> None:
        if obj is None:
            return
        await obj.aclose()

    await _aclose(runtime.consultant_client)
    await _aclose(runtime.identity_client)


def _build_session_store(settings: Settings) -> SessionStorePort:
    if not settings.storage.persist:
        return InMemorySessionStore()
    return FileSessionStore(settings.storage.session_file.expanduser())


class _SupportsAclose(Protocol):
    async def aclose(self) -> None:
        ...


__all__ = ["RuntimeContext", "build_runtime", "close_runtime_resources", "start_runtime"]
