"""HTTP adapter for the identity toolkit and secure token services."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from opentelemetry import trace
from opentelemetry.trace import SpanKind
from pydantic import ValidationError

from consultores_client.application.dto.token import TokenGrant
from consultores_client.application.ports.token_service import (
    TokenIssuerPort,
    TokenRefresherPort,
)
from consultores_client.clients import IDENTITY_TOOLKIT, SECURE_TOKEN
from consultores_client.errors import AuthenticationError, RefreshError
from consultores_client.infrastructure.identity.protocol import (
    RefreshRequest,
    RefreshResponse,
    SignInRequest,
    SignInResponse,
    error_reason,
)

_LOGGER = logging.getLogger("consultores_client.identity.calls")

_SIGN_IN_PATH = "/accounts:signInWithPassword"
_REFRESH_PATH = "/token"


class _ExchangeFailed(Exception):
    """Internal signal carrying a normalized failure description."""

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


class IdentityToolkitClient(TokenIssuerPort, TokenRefresherPort):
    """Async client implementing both token ports against the identity services."""

    def __init__(
        self,
        *,
        api_key: str,
        identity_base_url: str = IDENTITY_TOOLKIT.base_url,
        secure_token_base_url: str = SECURE_TOKEN.base_url,
        timeout: float = IDENTITY_TOOLKIT.timeout_seconds,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._sign_in_url = f"{identity_base_url.rstrip('/')}{_SIGN_IN_PATH}"
        self._refresh_url = f"{secure_token_base_url.rstrip('/')}{_REFRESH_PATH}"
        self._owns_client = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=timeout)

    async def sign_in(self, identifier: str, secret: str) -> TokenGrant:
        if not self._api_key:
            raise AuthenticationError("sign-in failed: identity service API key not configured")
        request = SignInRequest(email=identifier.strip(), password=secret.strip())
        try:
            payload = await self._post("identity.sign_in", self._sign_in_url, request.to_payload())
            response = SignInResponse.model_validate(payload)
        except _ExchangeFailed as exc:
            raise AuthenticationError(f"sign-in failed: {exc.reason}") from exc
        except ValidationError as exc:
            raise AuthenticationError("sign-in returned a malformed response") from exc
        return TokenGrant(
            identifier=response.email,
            access_token=response.id_token,
            refresh_token=response.refresh_token,
            lifetime_seconds=response.expires_in,
        )

    async def refresh(self, refresh_token: str) -> TokenGrant:
        if not self._api_key:
            raise RefreshError("token refresh failed: identity service API key not configured")
        request = RefreshRequest(refresh_token=refresh_token)
        try:
            payload = await self._post("identity.refresh", self._refresh_url, request.to_payload())
            response = RefreshResponse.model_validate(payload)
        except _ExchangeFailed as exc:
            raise RefreshError(f"token refresh failed: {exc.reason}") from exc
        except ValidationError as exc:
            raise RefreshError("token refresh returned a malformed response") from exc
        return TokenGrant(
            identifier=response.user_id,
            access_token=response.id_token,
            refresh_token=response.refresh_token,
            lifetime_seconds=response.expires_in,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # internal

    async def _post(self, operation: str, url: str, body: dict[str, Any]) -> object:
        tracer = trace.get_tracer("consultores_client.identity")
        start = time.perf_counter()
        with tracer.start_as_current_span(
            operation,
            kind=SpanKind.CLIENT,
            attributes={"http.method": "POST", "http.url": url},
        ) as span:
            try:
                response = await self._client.post(
                    url,
                    params={"key": self._api_key},
                    json=body,
                    headers={"Content-Type": "application/json"},
                )
            except httpx.HTTPError as exc:
                span.set_attributes({"identity.error": exc.__class__.__name__})
                self._log_failure(operation, start, status_code=None, reason=exc.__class__.__name__)
                raise _ExchangeFailed(f"identity service unreachable ({exc.__class__.__name__})") from exc

            span.set_attributes({"http.status_code": response.status_code})
            payload = self._decode(response)
            if response.is_error:
                reason = error_reason(payload) or f"http_{response.status_code}"
                span.set_attributes({"identity.error": reason})
                self._log_failure(operation, start, status_code=response.status_code, reason=reason)
                raise _ExchangeFailed(reason, response.status_code)

            _LOGGER.info(
                f"{operation}.complete",
                extra={
                    "data": {
                        "status_code": response.status_code,
                        "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                    }
                },
            )
            return payload

    @staticmethod
    def _decode(response: httpx.Response) -> object:
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _log_failure(operation: str, start: float, *, status_code: int | None, reason: str) -> None:
        _LOGGER.warning(
            f"{operation}.failed",
            extra={
                "data": {
                    "status_code": status_code,
                    "reason": reason,
                    "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                }
            },
        )


__all__ = ["IdentityToolkitClient"]
