"""Authenticated HTTP dispatch against the vehicle-data API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from vehiclelink._internal.redact import redact_for_log
from vehiclelink.api.errors import TransportError
from vehiclelink.models.auth import API_ORIGIN, API_VERSION, AccessCredential

if TYPE_CHECKING:
    from types import TracebackType

    from vehiclelink.models.config import AppSettings

logger = logging.getLogger(__name__)


def bearer_header(access_token: str | AccessCredential) -> str:
    """Return the ``Authorization`` header value for *access_token*."""
    if isinstance(access_token, AccessCredential):
        access_token = access_token.access_token
    return f"Bearer {access_token}"


class ApiClient:
    """Thin async wrapper over :class:`httpx.AsyncClient`.

    Holds only the API origin and a connection pool.  The access token is
    supplied on every call, so one client can serve many users and vehicles
    concurrently.  Responses are returned raw; see :mod:`vehiclelink.api.resolver`.
    """

    def __init__(
        self,
        *,
        api_origin: str = API_ORIGIN,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = f"{api_origin.rstrip('/')}/v{API_VERSION}"
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient()

    @classmethod
    def from_settings(
        cls, settings: AppSettings, http_client: httpx.AsyncClient | None = None
    ) -> ApiClient:
        return cls(api_origin=settings.api_origin, http_client=http_client)

    # -- lifecycle -----------------------------------------------------------

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # -- requests ------------------------------------------------------------

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        access_token: str | AccessCredential,
        json: Any | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send one authenticated request and return the raw response.

        Transport failures (connect, read, timeout) raise
        :class:`~vehiclelink.api.errors.TransportError`; HTTP status codes are
        left for the resolver to interpret.
        """
        url = self.url_for(path)
        request_headers = {"Authorization": bearer_header(access_token)}
        if headers:
            request_headers.update(headers)
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        logger.debug("%s %s body=%s", method, url, redact_for_log(json))
        try:
            resp = await self._client.request(
                method,
                url,
                json=json,
                params=params or None,
                headers=request_headers,
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        logger.debug(
            "%s %s -> %d (request id %s)",
            method,
            url,
            resp.status_code,
            resp.headers.get("sc-request-id", "-"),
        )
        return resp

    async def get(
        self,
        path: str,
        *,
        access_token: str | AccessCredential,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request(
            "GET", path, access_token=access_token, params=params, headers=headers
        )

    async def post(
        self,
        path: str,
        *,
        access_token: str | AccessCredential,
        json: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request(
            "POST", path, access_token=access_token, json=json, headers=headers
        )

    async def delete(
        self,
        path: str,
        *,
        access_token: str | AccessCredential,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("DELETE", path, access_token=access_token, headers=headers)
