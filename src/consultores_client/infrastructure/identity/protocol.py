"""Wire models for the identity toolkit sign-in and secure token refresh calls."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SignInRequest(BaseModel):
    """Body of ``accounts:signInWithPassword``."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    email: str
    password: str
    return_secure_token: bool = Field(default=True, alias="returnSecureToken")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class SignInResponse(BaseModel):
    """Relevant subset of a successful sign-in response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id_token: str = Field(alias="idToken", min_length=1)
    email: str = Field(min_length=1)
    refresh_token: str = Field(alias="refreshToken", min_length=1)
    expires_in: int = Field(alias="expiresIn", ge=0)


class RefreshRequest(BaseModel):
    """Body of the secure token ``token`` exchange."""

    model_config = ConfigDict(extra="forbid")

    grant_type: str = "refresh_token"
    refresh_token: str

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump()


class RefreshResponse(BaseModel):
    """Relevant subset of a successful refresh response."""

    model_config = ConfigDict(extra="ignore")

    id_token: str = Field(min_length=1)
    refresh_token: str = Field(min_length=1)
    expires_in: int = Field(ge=0)
    user_id: str = ""


def error_reason(payload: object) -> str | None:
    """Extract the service error code (``{"error": {"message": ...}}``) when present."""
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        return str(message) if message else None
    if isinstance(error, str):
        return error
    return None


__all__ = [
    "RefreshRequest",
    "RefreshResponse",
    "SignInRequest",
    "SignInResponse",
    "error_reason",
]
