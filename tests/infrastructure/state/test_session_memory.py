from __future__ import annotations

from consultores_client.domain.session import Session
from consultores_client.infrastructure.state.session_memory import InMemorySessionStore


def test_in_memory_store_replaces_and_clears() -> None:
    store = InMemorySessionStore()
    session = Session(identifier="a@b.com", access_token="T1", refresh_token="R1", expires_at=1)

    store.save(session)
    assert store.load() is session

    store.save(None)
    assert store.load() is None
    assert store.saves == 2
