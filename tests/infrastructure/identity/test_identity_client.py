from __future__ import annotations

import json
import logging

import httpx
import pytest

from consultores_client.application.dto.token import TokenGrant
from consultores_client.errors import AuthenticationError, RefreshError
from consultores_client.infrastructure.identity.client import IdentityToolkitClient

pytestmark = pytest.mark.anyio("asyncio")

_IDENTITY_BASE = "https://identity.mock/v1"
_TOKEN_BASE = "https://token.mock/v1"


def _client(handler) -> IdentityToolkitClient:
    return IdentityToolkitClient(
        api_key="k-123",
        identity_base_url=_IDENTITY_BASE,
        secure_token_base_url=_TOKEN_BASE,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


async def test_sign_in_posts_trimmed_credentials_with_api_key() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(
            200,
            json={
                "idToken": "T1",
                "email": "a@b.com",
                "refreshToken": "R1",
                "expiresIn": "3600",
                "localId": "uid-1",
            },
        )

    client = _client(handler)
    grant = await client.sign_in("  a@b.com ", " secret ")

    assert grant == TokenGrant(
        identifier="a@b.com",
        access_token="T1",
        refresh_token="R1",
        lifetime_seconds=3600,
    )
    request = captured[0]
    assert request.method == "POST"
    assert request.url.host == "identity.mock"
    assert request.url.path == "/v1/accounts:signInWithPassword"
    assert request.url.params["key"] == "k-123"
    assert json.loads(request.content) == {
        "email": "a@b.com",
        "password": "secret",
        "returnSecureToken": True,
    }


async def test_sign_in_rejection_raises_authentication_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"code": 400, "message": "INVALID_PASSWORD"}})

    with pytest.raises(AuthenticationError, match="INVALID_PASSWORD"):
        await _client(handler).sign_in("a@b.com", "wrong")


async def test_sign_in_error_without_body_reports_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(AuthenticationError, match="http_503"):
        await _client(handler).sign_in("a@b.com", "secret")


async def test_sign_in_transport_failure_raises_authentication_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    with pytest.raises(AuthenticationError, match="unreachable"):
        await _client(handler).sign_in("a@b.com", "secret")


async def test_sign_in_malformed_response_raises_authentication_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"idToken": "T1", "email": "a@b.com"})

    with pytest.raises(AuthenticationError, match="malformed"):
        await _client(handler).sign_in("a@b.com", "secret")


async def test_refresh_posts_grant_and_returns_rotated_tokens() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(
            200,
            json={
                "id_token": "T2",
                "refresh_token": "R2",
                "expires_in": "3600",
                "user_id": "uid-1",
                "token_type": "Bearer",
            },
        )

    grant = await _client(handler).refresh("R1")

    assert grant == TokenGrant(
        identifier="uid-1",
        access_token="T2",
        refresh_token="R2",
        lifetime_seconds=3600,
    )
    request = captured[0]
    assert request.url.path == "/v1/token"
    assert request.url.host == "token.mock"
    assert request.url.params["key"] == "k-123"
    assert json.loads(request.content) == {"grant_type": "refresh_token", "refresh_token": "R1"}


async def test_refresh_rejection_raises_refresh_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"message": "TOKEN_EXPIRED"}})

    with pytest.raises(RefreshError, match="TOKEN_EXPIRED"):
        await _client(handler).refresh("R1")


async def test_refresh_transport_failure_raises_refresh_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(RefreshError, match="unreachable"):
        await _client(handler).refresh("R1")


async def test_refresh_malformed_response_raises_refresh_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id_token": "", "refresh_token": "R2", "expires_in": 3600})

    with pytest.raises(RefreshError, match="malformed"):
        await _client(handler).refresh("R1")


async def test_tokens_and_key_stay_out_of_call_logs(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="consultores_client.identity.calls")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"id_token": "T2", "refresh_token": "R2", "expires_in": 3600, "user_id": "uid-1"},
        )

    await _client(handler).refresh("R1")

    assert [record.msg for record in caplog.records] == ["identity.refresh.complete"]
    rendered = " ".join(f"{record.getMessage()} {getattr(record, 'data', '')}" for record in caplog.records)
    for secret in ("k-123", "R1", "T2", "R2"):
        assert secret not in rendered


async def test_missing_api_key_fails_calls_without_network() -> None:
    sent: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(request)
        return httpx.Response(200)

    client = IdentityToolkitClient(
        api_key="",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(AuthenticationError, match="API key not configured"):
        await client.sign_in("a@b.com", "secret")
    with pytest.raises(RefreshError, match="API key not configured"):
        await client.refresh("R1")
    assert sent == []


async def test_aclose_leaves_injected_client_open() -> None:
    http = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    client = IdentityToolkitClient(api_key="k", client=http)

    await client.aclose()

    assert http.is_closed is False
    await http.aclose()
