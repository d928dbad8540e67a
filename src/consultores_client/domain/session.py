"""Authentication session record and its freshness rules."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

SAFETY_MARGIN_MS = 60_000


class SessionState(str, Enum):
    """Observable lifecycle states of the session manager."""

    UNAUTHENTICATED = "unauthenticated"
    FRESH = "fresh"
    STALE = "stale"


@dataclass(frozen=True, slots=True)
class Session:
    """Cached identity, token pair and absolute expiry in epoch milliseconds."""

    identifier: str
    access_token: str
    refresh_token: str
    expires_at: int

    def __post_init__(self) -> None:
        if not self.identifier:
            raise ValueError("identifier must be non-empty")
        if not self.access_token:
            raise ValueError("access_token must be non-empty")
        if not self.refresh_token:
            raise ValueError("refresh_token must be non-empty")
        if isinstance(self.expires_at, bool) or not isinstance(self.expires_at, int):
            raise ValueError("expires_at must be an integer epoch millisecond value")
        if self.expires_at < 0:
            raise ValueError("expires_at must be non-negative")

    @classmethod
    def issue(
        cls,
        *,
        identifier: str,
        access_token: str,
        refresh_token: str,
        lifetime_seconds: int,
        issued_at_ms: int,
    ) -> Session:
        """Build a session whose expiry is ``issued_at_ms`` plus the declared lifetime."""
        if lifetime_seconds < 0:
            raise ValueError("lifetime_seconds must be non-negative")
        return cls(
            identifier=identifier,
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=issued_at_ms + lifetime_seconds * 1000,
        )

    def renew(
        self,
        *,
        access_token: str,
        refresh_token: str,
        lifetime_seconds: int,
        issued_at_ms: int,
    ) -> Session:
        """Return a replacement session for the same identifier with a rotated token pair."""
        if lifetime_seconds < 0:
            raise ValueError("lifetime_seconds must be non-negative")
        return replace(
            self,
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=issued_at_ms + lifetime_seconds * 1000,
        )

    def is_expired(self, now_ms: int) -> bool:
        return self.expires_at <= now_ms

    def is_fresh(self, now_ms: int, margin_ms: int = SAFETY_MARGIN_MS) -> bool:
        """Return ``True`` when the access token outlives ``now_ms`` by more than ``margin_ms``."""
        return self.expires_at - margin_ms > now_ms

    def state(self, now_ms: int, margin_ms: int = SAFETY_MARGIN_MS) -> SessionState:
        return SessionState.FRESH if self.is_fresh(now_ms, margin_ms) else SessionState.STALE

    def __repr__(self) -> str:
        return f"Session(identifier={self.identifier!r}, expires_at={self.expires_at})"


__all__ = ["SAFETY_MARGIN_MS", "Session", "SessionState"]
