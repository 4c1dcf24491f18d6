"""Async client for a connected-vehicle API: Connect OAuth flow and vehicle requests."""

from __future__ import annotations

from vehiclelink.api.client import ApiClient
from vehiclelink.api.errors import (
    ApiError,
    AuthError,
    ConfigError,
    HttpError,
    ParseError,
    TransportError,
    VehicleLinkError,
)
from vehiclelink.api.resolver import resolve, resolve_batch
from vehiclelink.api.user import UserAPI
from vehiclelink.api.vehicle import UnitSystem, VehicleAPI
from vehiclelink.auth.oauth import (
    AuthClient,
    build_auth_url,
    exchange_code,
    exchange_refresh_token,
    get_compatibility,
)
from vehiclelink.auth.webhooks import hash_challenge, verify_payload
from vehiclelink.models import (
    AccessCredential,
    ApiResponse,
    AppSettings,
    AuthUrlOptions,
    BatchResult,
    ClientCredentials,
    Permission,
    RequestMeta,
    ScopeBuilder,
)

__version__ = "0.1.0"

__all__ = [
    "AccessCredential",
    "ApiClient",
    "ApiError",
    "ApiResponse",
    "AppSettings",
    "AuthClient",
    "AuthError",
    "AuthUrlOptions",
    "BatchResult",
    "ClientCredentials",
    "ConfigError",
    "HttpError",
    "ParseError",
    "Permission",
    "RequestMeta",
    "ScopeBuilder",
    "TransportError",
    "UnitSystem",
    "UserAPI",
    "VehicleAPI",
    "VehicleLinkError",
    "build_auth_url",
    "exchange_code",
    "exchange_refresh_token",
    "get_compatibility",
    "hash_challenge",
    "resolve",
    "resolve_batch",
    "verify_payload",
]
