"""Port describing durable storage for the authentication session."""

from __future__ import annotations

from typing import Protocol

from consultores_client.domain.session import Session


class SessionStorePort(Protocol):
    """Single-record store mirroring the in-memory session."""

    def load(self) -> Session | None:
        """Return the stored session, or ``None`` when absent or unreadable."""

    def save(self, session: Session | None) -> None:
        """Overwrite the stored session, or delete it when ``session`` is ``None``."""


__all__ = ["SessionStorePort"]
