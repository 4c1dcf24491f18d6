"""Connect URL building and the code / refresh-token exchanges."""

from __future__ import annotations

import contextlib
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, urlencode

import httpx
from pydantic import ValidationError

from vehiclelink._internal.redact import redact_for_log
from vehiclelink.api.errors import AuthError, ParseError, TransportError
from vehiclelink.api.resolver import resolve
from vehiclelink.models.auth import (
    API_ORIGIN,
    API_VERSION,
    AUTHORIZE_PATH,
    CONNECT_URL,
    TOKEN_URL,
    AccessCredential,
    AuthUrlOptions,
    ClientCredentials,
    ScopeBuilder,
    TokenData,
)
from vehiclelink.models.config import AppSettings
from vehiclelink.models.vehicle import Compatibility

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from vehiclelink.models.response import ApiResponse

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Connect URL
# ---------------------------------------------------------------------------


def build_auth_url(
    credentials: ClientCredentials,
    scope: ScopeBuilder,
    options: AuthUrlOptions | None = None,
    *,
    connect_url: str = CONNECT_URL,
) -> str:
    """Build the Connect URL the vehicle owner is redirected to.

    Pure and deterministic: identical inputs give byte-identical URLs.  Only
    the ``client_id`` is included; the secret never leaves the server.
    """
    params: list[tuple[str, str]] = [
        ("response_type", "code"),
        ("client_id", credentials.client_id),
        ("redirect_uri", credentials.redirect_uri),
        ("scope", scope.query_value),
    ]
    if credentials.test_mode:
        params.append(("mode", "test"))
    if options is not None:
        params.extend(options.query_params())
    query = urlencode(params, quote_via=quote, safe="")
    return f"{connect_url.rstrip('/')}{AUTHORIZE_PATH}?{query}"


# ---------------------------------------------------------------------------
# Token exchange / refresh
# ---------------------------------------------------------------------------


@contextlib.asynccontextmanager
async def _http(client: httpx.AsyncClient | None) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient() as owned:
        yield owned


def _basic_auth(credentials: ClientCredentials) -> httpx.BasicAuth:
    return httpx.BasicAuth(credentials.client_id, credentials.client_secret.get_secret_value())


def _first_str(payload: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def _auth_error(label: str, resp: httpx.Response) -> AuthError:
    """Map a rejected token request to :class:`AuthError`.

    Understands both the OAuth ``{"error", "error_description"}`` body and the
    API's ``{"type", "code", "description"}`` envelope.
    """
    code: str | None = None
    description: str | None = None
    try:
        payload: Any = resp.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        code = _first_str(payload, "error", "code", "type")
        description = _first_str(payload, "error_description", "description")
    detail = code or resp.text[:200] or "<empty body>"
    if description:
        detail = f"{detail} ({description})"
    return AuthError(
        f"{label} failed (HTTP {resp.status_code}): {detail}",
        status_code=resp.status_code,
        code=code,
        description=description,
    )


async def _token_request(
    label: str,
    form: dict[str, str],
    credentials: ClientCredentials,
    *,
    token_url: str,
    http_client: httpx.AsyncClient | None,
) -> AccessCredential:
    logger.debug("POST %s form=%s", token_url, redact_for_log(form))
    try:
        async with _http(http_client) as client:
            resp = await client.post(token_url, data=form, auth=_basic_auth(credentials))
    except httpx.HTTPError as exc:
        raise TransportError(f"{label} request failed: {exc}") from exc
    received_at = datetime.now(UTC)
    logger.debug("POST %s -> %d", token_url, resp.status_code)

    if not 200 <= resp.status_code < 300:
        raise _auth_error(label, resp)
    try:
        token = TokenData.model_validate(resp.json())
    except (ValueError, ValidationError) as exc:
        raise ParseError(
            f"{label} returned an unexpected token payload",
            status_code=resp.status_code,
            raw_body=resp.text,
        ) from exc
    return AccessCredential.from_token_data(token, received_at)


async def exchange_code(
    code: str,
    credentials: ClientCredentials,
    *,
    token_url: str = TOKEN_URL,
    http_client: httpx.AsyncClient | None = None,
) -> AccessCredential:
    """Exchange a single-use authorization code for an :class:`AccessCredential`.

    Not retried: a code that reached the token endpoint is spent.
    """
    if not code:
        raise AuthError("Authorization code must not be empty")
    form = {
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": credentials.redirect_uri,
    }
    return await _token_request(
        "Token exchange", form, credentials, token_url=token_url, http_client=http_client
    )


async def exchange_refresh_token(
    refresh_token: str,
    credentials: ClientCredentials,
    *,
    token_url: str = TOKEN_URL,
    http_client: httpx.AsyncClient | None = None,
) -> AccessCredential:
    """Trade a refresh token for a brand-new access/refresh pair.

    The caller must persist the returned credential; the old pair is
    invalidated provider-side.
    """
    if not refresh_token:
        raise AuthError("Refresh token must not be empty")
    form = {
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
    }
    return await _token_request(
        "Token refresh", form, credentials, token_url=token_url, http_client=http_client
    )


# ---------------------------------------------------------------------------
# Compatibility
# ---------------------------------------------------------------------------


async def get_compatibility(
    vin: str,
    scope: ScopeBuilder,
    credentials: ClientCredentials,
    *,
    country: str = "US",
    api_origin: str = API_ORIGIN,
    http_client: httpx.AsyncClient | None = None,
) -> ApiResponse[Compatibility]:
    """Check whether *vin* supports every permission in *scope*.

    Authenticated with the client credentials, so it can run before the owner
    goes through Connect.
    """
    url = f"{api_origin.rstrip('/')}/v{API_VERSION}/compatibility"
    params = {"vin": vin, "scope": scope.query_value, "country": country}
    logger.debug("GET %s params=%s", url, params)
    try:
        async with _http(http_client) as client:
            resp = await client.get(url, params=params, auth=_basic_auth(credentials))
    except httpx.HTTPError as exc:
        raise TransportError(f"Compatibility request failed: {exc}") from exc
    return resolve(resp.status_code, resp.content, Compatibility, resp.headers)


# ---------------------------------------------------------------------------
# Client facade
# ---------------------------------------------------------------------------


class AuthClient:
    """OAuth client bound to one application's :class:`ClientCredentials`.

    Holds no token state: every exchange returns a new
    :class:`AccessCredential` that the caller stores.
    """

    def __init__(
        self,
        credentials: ClientCredentials,
        *,
        connect_url: str = CONNECT_URL,
        token_url: str = TOKEN_URL,
        api_origin: str = API_ORIGIN,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.credentials = credentials
        self.connect_url = connect_url
        self.token_url = token_url
        self.api_origin = api_origin
        self._http_client = http_client

    @classmethod
    def from_settings(
        cls, settings: AppSettings, http_client: httpx.AsyncClient | None = None
    ) -> AuthClient:
        return cls(
            ClientCredentials.from_settings(settings),
            connect_url=settings.connect_url,
            token_url=settings.auth_origin,
            api_origin=settings.api_origin,
            http_client=http_client,
        )

    @classmethod
    def from_env(cls, test_mode: bool | None = None) -> AuthClient:
        """Build from ``SMARTCAR_*`` environment variables (and ``.env``).

        Raises :class:`~vehiclelink.api.errors.ConfigError` when the client id,
        secret, or redirect URI is missing.
        """
        settings = AppSettings()
        if test_mode is not None:
            settings = settings.model_copy(update={"test_mode": test_mode})
        return cls.from_settings(settings)

    def get_auth_url(self, scope: ScopeBuilder, options: AuthUrlOptions | None = None) -> str:
        return build_auth_url(self.credentials, scope, options, connect_url=self.connect_url)

    async def exchange_code(self, code: str) -> AccessCredential:
        return await exchange_code(
            code, self.credentials, token_url=self.token_url, http_client=self._http_client
        )

    async def exchange_refresh_token(self, refresh_token: str) -> AccessCredential:
        return await exchange_refresh_token(
            refresh_token,
            self.credentials,
            token_url=self.token_url,
            http_client=self._http_client,
        )

    async def get_compatibility(
        self, vin: str, scope: ScopeBuilder, *, country: str = "US"
    ) -> ApiResponse[Compatibility]:
        return await get_compatibility(
            vin,
            scope,
            self.credentials,
            country=country,
            api_origin=self.api_origin,
            http_client=self._http_client,
        )

    def __repr__(self) -> str:
        return f"AuthClient(client_id={self.credentials.client_id!r})"
