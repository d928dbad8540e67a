"""HTTP client for the consultant registry backend."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from opentelemetry import trace
from opentelemetry.trace import SpanKind
from pydantic import BaseModel, TypeAdapter, ValidationError

from consultores_client.application.ports.token_service import AccessTokenProvider
from consultores_client.clients import CONSULTANT_API
from consultores_client.domain.consultant import (
    Consultant,
    ConsultantInput,
    ConsultantMutation,
    ConsultantUpdate,
)
from consultores_client.errors import ConsultantApiError

_LOGGER = logging.getLogger("consultores_client.api.consultants")

_CONSULTANT_LIST = TypeAdapter(list[Consultant])

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class HttpConsultantClient:
    """CRUD operations on a single resource URL, authenticated per request."""

    def __init__(
        self,
        *,
        base_url: str,
        tokens: AccessTokenProvider,
        timeout: float = CONSULTANT_API.timeout_seconds,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("consultant API base_url must not be empty")
        self._base_url = base_url
        self._tokens = tokens
        self._owns_client = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=timeout)

    async def list(self) -> list[Consultant]:
        payload = await self._request("GET")
        try:
            return _CONSULTANT_LIST.validate_python(payload)
        except ValidationError as exc:
            raise ConsultantApiError("consultant list response was malformed") from exc

    async def get(self, consultant_id: str) -> Consultant:
        payload = await self._request("GET", params={"id": consultant_id})
        return self._parse(Consultant, payload)

    async def create(self, payload: ConsultantInput) -> Consultant:
        body = await self._request("POST", json_body=payload.to_payload())
        return self._parse(Consultant, body)

    async def update(self, payload: ConsultantUpdate) -> ConsultantMutation:
        body = await self._request("PUT", json_body=payload.to_payload())
        return self._parse(ConsultantMutation, body)

    async def remove(self, consultant_id: str) -> ConsultantMutation:
        body = await self._request("DELETE", params={"id": consultant_id})
        return self._parse(ConsultantMutation, body)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # internal

    async def _headers(self) -> dict[str, str]:
        # Raises before anything is sent when no valid session exists.
        token = await self._tokens.get_valid_token()
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _request(
        self,
        method: str,
        *,
        params: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> object:
        headers = await self._headers()
        tracer = trace.get_tracer("consultores_client.api")
        with tracer.start_as_current_span(
            f"consultants.{method.lower()}",
            kind=SpanKind.CLIENT,
            attributes={"http.method": method, "http.url": self._base_url},
        ) as span:
            try:
                response = await self._client.request(
                    method,
                    self._base_url,
                    params=params,
                    json=json_body,
                    headers=headers,
                )
            except httpx.HTTPError as exc:
                span.set_attributes({"consultants.error": exc.__class__.__name__})
                raise ConsultantApiError(
                    f"consultant API unreachable: {method} {self._base_url}: {exc}"
                ) from exc
            span.set_attributes({"http.status_code": response.status_code})

        if response.is_error:
            _LOGGER.warning(
                "consultant request failed",
                extra={
                    "data": {
                        "method": method,
                        "params": params,
                        "status_code": response.status_code,
                    }
                },
            )
            raise ConsultantApiError(
                f"consultant API returned {response.status_code} for {method}",
                status_code=response.status_code,
            )
        _LOGGER.debug(
            "consultant request complete",
            extra={"data": {"method": method, "params": params, "status_code": response.status_code}},
        )
        try:
            return response.json()
        except ValueError as exc:
            raise ConsultantApiError(
                f"consultant API returned a non-JSON body for {method}",
                status_code=response.status_code,
            ) from exc

    @staticmethod
    def _parse(model: type[_ModelT], payload: object) -> _ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise ConsultantApiError(f"{model.__name__} response was malformed") from exc


__all__ = ["HttpConsultantClient"]
