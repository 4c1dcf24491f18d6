"""Tests for vehiclelink.api.client — ApiClient."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import httpx
import pytest

from vehiclelink.api.client import ApiClient, bearer_header
from vehiclelink.api.errors import TransportError
from vehiclelink.models.auth import AccessCredential

if TYPE_CHECKING:
    from pytest_httpx import HTTPXMock

API_BASE = "https://api.smartcar.com/v2.0"


def _credential(token: str = "tok123") -> AccessCredential:
    now = datetime.now(UTC)
    return AccessCredential(
        access_token=token,
        refresh_token="rt",
        access_token_expires_at=now,
        refresh_token_expires_at=now,
    )


class TestBearerHeader:
    def test_from_string(self) -> None:
        assert bearer_header("abc") == "Bearer abc"

    def test_from_credential(self) -> None:
        assert bearer_header(_credential("xyz")) == "Bearer xyz"


class TestUrls:
    def test_default_base(self) -> None:
        api_client = ApiClient()
        assert api_client.base_url == API_BASE
        assert api_client.url_for("/vehicles/1/odometer") == f"{API_BASE}/vehicles/1/odometer"

    def test_custom_origin(self) -> None:
        client = ApiClient(api_origin="http://localhost:9000/")
        assert client.url_for("user") == "http://localhost:9000/v2.0/user"


class TestGetSuccess:
    @pytest.mark.asyncio
    async def test_get_returns_raw_response(
        self, httpx_mock: HTTPXMock, api_client: ApiClient
    ) -> None:
        httpx_mock.add_response(url=f"{API_BASE}/vehicles/1/odometer", json={"distance": 1.5})
        resp = await api_client.get("/vehicles/1/odometer", access_token="tok123")
        assert resp.status_code == 200
        assert resp.json() == {"distance": 1.5}

    @pytest.mark.asyncio
    async def test_error_status_not_raised(
        self, httpx_mock: HTTPXMock, api_client: ApiClient
    ) -> None:
        httpx_mock.add_response(url=f"{API_BASE}/vehicles/1/fuel", status_code=404)
        resp = await api_client.get("/vehicles/1/fuel", access_token="tok123")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_none_params_dropped(self, httpx_mock: HTTPXMock, api_client: ApiClient) -> None:
        httpx_mock.add_response(url=f"{API_BASE}/vehicles?limit=10", json={})
        await api_client.get("/vehicles", access_token="t", params={"limit": 10, "offset": None})
        request = httpx_mock.get_requests()[0]
        assert "offset" not in request.url.params


class TestAuthHeaderSent:
    @pytest.mark.asyncio
    async def test_string_token(self, httpx_mock: HTTPXMock, api_client: ApiClient) -> None:
        httpx_mock.add_response(url=f"{API_BASE}/user", json={"id": "u"})
        await api_client.get("/user", access_token="tok123")
        request = httpx_mock.get_requests()[0]
        assert request.headers["authorization"] == "Bearer tok123"

    @pytest.mark.asyncio
    async def test_credential_token(self, httpx_mock: HTTPXMock, api_client: ApiClient) -> None:
        httpx_mock.add_response(url=f"{API_BASE}/user", json={"id": "u"})
        await api_client.get("/user", access_token=_credential("from-credential"))
        request = httpx_mock.get_requests()[0]
        assert request.headers["authorization"] == "Bearer from-credential"

    @pytest.mark.asyncio
    async def test_tokens_are_per_call(self, httpx_mock: HTTPXMock, api_client: ApiClient) -> None:
        httpx_mock.add_response(url=f"{API_BASE}/user", json={"id": "a"})
        httpx_mock.add_response(url=f"{API_BASE}/user", json={"id": "b"})
        await api_client.get("/user", access_token="user-a")
        await api_client.get("/user", access_token="user-b")
        first, second = httpx_mock.get_requests()
        assert first.headers["authorization"] == "Bearer user-a"
        assert second.headers["authorization"] == "Bearer user-b"


class TestPost:
    @pytest.mark.asyncio
    async def test_json_body(self, httpx_mock: HTTPXMock, api_client: ApiClient) -> None:
        httpx_mock.add_response(
            url=f"{API_BASE}/vehicles/1/security",
            method="POST",
            json={"status": "success"},
        )
        await api_client.post(
            "/vehicles/1/security", access_token="tok", json={"action": "LOCK"}
        )
        request = httpx_mock.get_requests()[0]
        assert json.loads(request.content) == {"action": "LOCK"}
        assert request.headers["content-type"] == "application/json"


class TestTransportErrors:
    @pytest.mark.asyncio
    async def test_connect_error(self, httpx_mock: HTTPXMock, api_client: ApiClient) -> None:
        httpx_mock.add_exception(httpx.ConnectError("refused"))
        with pytest.raises(TransportError, match="GET"):
            await api_client.get("/user", access_token="tok")

    @pytest.mark.asyncio
    async def test_timeout(self, httpx_mock: HTTPXMock, api_client: ApiClient) -> None:
        httpx_mock.add_exception(httpx.ReadTimeout("slow"))
        with pytest.raises(TransportError) as exc_info:
            await api_client.delete("/vehicles/1/application", access_token="tok")
        assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_injected_client_left_open(self) -> None:
        async with httpx.AsyncClient() as http:
            async with ApiClient(http_client=http):
                pass
            assert not http.is_closed

    @pytest.mark.asyncio
    async def test_owned_client_closed(self) -> None:
        client = ApiClient()
        async with client:
            pass
        assert client._client.is_closed
