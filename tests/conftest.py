"""Shared fixtures for vehiclelink tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
import pytest_asyncio

from vehiclelink.api.client import ApiClient
from vehiclelink.models.auth import ClientCredentials

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@pytest.fixture()
def credentials() -> ClientCredentials:
    return ClientCredentials(
        client_id="test-client-id",
        client_secret="test-client-secret",
        redirect_uri="https://example.com/callback",
    )


@pytest_asyncio.fixture()
async def api_client() -> AsyncIterator[ApiClient]:
    client = ApiClient()
    yield client
    await client.aclose()


@pytest.fixture()
def sample_token_response() -> dict[str, Any]:
    return {
        "access_token": "AT",
        "token_type": "Bearer",
        "refresh_token": "RT",
        "expires_in": 7200,
        "refresh_token_expires_in": 5184000,
    }


@pytest.fixture()
def sample_attributes() -> dict[str, Any]:
    return {"make": "TESLA", "model": "Model 3", "year": 2020, "id": "abc"}


@pytest.fixture()
def sample_error_envelope() -> dict[str, Any]:
    return {
        "type": "PERMISSION",
        "code": None,
        "description": (
            "Your application has insufficient permissions to access the requested resource."
        ),
        "docURL": "https://smartcar.com/docs/errors/v2.0/other-errors/#permission",
        "statusCode": 403,
        "resolution": {"type": "REAUTHENTICATE"},
        "requestId": "5dea93a1-3f79-4246-90c6-5b2d8ea6ff32",
    }
