"""Exception taxonomy for session and consultant API failures."""

from __future__ import annotations


class SessionError(Exception):
    """Base class for session lifecycle failures."""


class AuthenticationError(SessionError):
    """Raised when credentials are rejected or the identity service is unreachable."""


class RefreshError(SessionError):
    """Raised when exchanging a refresh token for a new access token fails."""


class NotAuthenticatedError(SessionError):
    """Raised when a token is requested while no session exists."""


class StorageError(SessionError):
    """Raised by session stores internally; never escapes the store boundary."""


class ConsultantApiError(RuntimeError):
    """Raised when the consultant backend responds with an unexpected status or body."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


__all__ = [
    "AuthenticationError",
    "ConsultantApiError",
    "NotAuthenticatedError",
    "RefreshError",
    "SessionError",
    "StorageError",
]
