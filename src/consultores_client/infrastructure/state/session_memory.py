"""In-memory implementation of the session store port."""

from __future__ import annotations

from consultores_client.application.ports.session_store import SessionStorePort
from consultores_client.domain.session import Session


class InMemorySessionStore(SessionStorePort):
    """Keeps the session for the lifetime of the process only."""

    def __init__(self, session: Session | None = None) -> None:
        self._session = session
        self.saves = 0

    def load(self) -> Session | None:
        return self._session

    def save(self, session: Session | None) -> None:
        self._session = session
        self.saves += 1


__all__ = ["InMemorySessionStore"]
