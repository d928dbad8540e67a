"""Shared client defaults (base URLs, timeouts) for external services."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class IdentityToolkitDefaults:
    base_url: str = "https://identitytoolkit.googleapis.com/v1"
    timeout_seconds: float = 15.0


@dataclass(frozen=True, slots=True)
class SecureTokenDefaults:
    base_url: str = "https://securetoken.googleapis.com/v1"
    timeout_seconds: float = 15.0


@dataclass(frozen=True, slots=True)
class ConsultantApiDefaults:
    timeout_seconds: float = 10.0


# Instances
IDENTITY_TOOLKIT = IdentityToolkitDefaults()
SECURE_TOKEN = SecureTokenDefaults()
CONSULTANT_API = ConsultantApiDefaults()

__all__ = [
    "CONSULTANT_API",
    "IDENTITY_TOOLKIT",
    "SECURE_TOKEN",
    "ConsultantApiDefaults",
    "IdentityToolkitDefaults",
    "SecureTokenDefaults",
]
