"""Exception hierarchy for vehiclelink.

Every failure surfaces as a :class:`VehicleLinkError` subclass; nothing is
retried or swallowed inside the library.
"""

from __future__ import annotations

from typing import Any


class VehicleLinkError(Exception):
    """Base exception for all vehiclelink errors."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ConfigError(VehicleLinkError):
    """Missing or invalid client configuration."""


class TransportError(VehicleLinkError):
    """The HTTP request never produced a response (connect, read, timeout)."""


class ParseError(VehicleLinkError):
    """A response body did not match the shape the endpoint promises."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        raw_body: str = "",
    ) -> None:
        self.raw_body = raw_body
        super().__init__(message, status_code=status_code)


class AuthError(VehicleLinkError):
    """The token endpoint rejected a code or refresh-token exchange."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
        description: str | None = None,
    ) -> None:
        self.code = code
        self.description = description
        super().__init__(message, status_code=status_code)


class ApiError(VehicleLinkError):
    """Structured error returned by the vehicle API for a resource call.

    ``code`` is the most specific identifier the provider sent: the
    envelope's ``code`` when present, otherwise its ``type``.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_type: str | None = None,
        code: str | None = None,
        description: str | None = None,
        doc_url: str | None = None,
        resolution: dict[str, Any] | None = None,
        request_id: str | None = None,
    ) -> None:
        self.error_type = error_type
        self.code = code
        self.description = description
        self.doc_url = doc_url
        self.resolution = resolution or {}
        self.request_id = request_id
        super().__init__(message, status_code=status_code)


class HttpError(ApiError):
    """Non-2xx response whose body is not a recognizable error envelope."""

    def __init__(self, status_code: int, raw_body: str) -> None:
        self.raw_body = raw_body
        super().__init__(
            f"HTTP {status_code}: {raw_body[:200] or '<empty body>'}",
            status_code=status_code,
        )
