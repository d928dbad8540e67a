"""Ports describing the remote token issuing and refresh exchanges."""

from __future__ import annotations

from typing import Protocol

from consultores_client.application.dto.token import TokenGrant


class TokenIssuerPort(Protocol):
    """Exchanges user credentials for a token pair."""

    async def sign_in(self, identifier: str, secret: str) -> TokenGrant:
        """Return a fresh grant or raise ``AuthenticationError``."""


class TokenRefresherPort(Protocol):
    """Exchanges a refresh token for a rotated token pair."""

    async def refresh(self, refresh_token: str) -> TokenGrant:
        """Return a rotated grant or raise ``RefreshError``."""


class AccessTokenProvider(Protocol):
    """Source of bearer tokens for authenticated outbound calls."""

    async def get_valid_token(self) -> str:
        """Return an access token valid for at least one request round trip."""


__all__ = ["AccessTokenProvider", "TokenIssuerPort", "TokenRefresherPort"]
