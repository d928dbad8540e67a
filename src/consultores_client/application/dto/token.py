"""DTOs exchanged between the session manager and token services."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenGrant:
    """Tokens minted by a sign-in or refresh exchange."""

    identifier: str
    access_token: str
    refresh_token: str
    lifetime_seconds: int

    def __post_init__(self) -> None:
        if self.lifetime_seconds < 0:
            raise ValueError("lifetime_seconds must be non-negative")


@dataclass(frozen=True)
class SessionSnapshot:
    """Authentication state delivered to session listeners."""

    is_authenticated: bool
    user_identifier: str | None


__all__ = ["SessionSnapshot", "TokenGrant"]
