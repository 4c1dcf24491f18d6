"""Turn raw HTTP responses into typed results or typed errors.

Batch sub-responses are decoded against the shape implied by their request
path (see :data:`BATCH_SHAPES`); the JSON payload is never inspected to guess
which shape it is, since several shapes share field names (``range``,
``percentRemaining``).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError

from vehiclelink.api.errors import ApiError, HttpError, ParseError
from vehiclelink.models.response import ApiResponse, BatchResult, ErrorEnvelope, RequestMeta
from vehiclelink.models.vehicle import (
    ApplicationPermissions,
    BatteryCapacity,
    BatteryLevel,
    ChargingStatus,
    EngineOilLife,
    FuelTank,
    Location,
    Odometer,
    RawBody,
    TirePressure,
    VehicleAttributes,
    Vin,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# Request path (relative to the vehicle) -> response shape.
BATCH_SHAPES: dict[str, type[BaseModel]] = {
    "/": VehicleAttributes,
    "/permissions": ApplicationPermissions,
    "/engine/oil": EngineOilLife,
    "/battery/capacity": BatteryCapacity,
    "/battery": BatteryLevel,
    "/charge": ChargingStatus,
    "/fuel": FuelTank,
    "/location": Location,
    "/odometer": Odometer,
    "/tires/pressure": TirePressure,
    "/vin": Vin,
}


def normalize_path(path: str) -> str:
    """Canonical form of a vehicle-relative path: leading slash, no trailing one."""
    stripped = path.strip().strip("/")
    return f"/{stripped}" if stripped else "/"


def shape_for_path(path: str) -> type[BaseModel]:
    return BATCH_SHAPES.get(normalize_path(path), RawBody)


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def _text(body: bytes | str) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


def _load_json(body: bytes | str | None) -> Any:
    if body is None or body == b"" or body == "":
        raise ValueError("empty body")
    return json.loads(body)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def error_from_payload(status_code: int, payload: Any, raw_body: str = "") -> ApiError:
    """Build an :class:`ApiError` from an already-decoded error body."""
    if not isinstance(payload, dict):
        return HttpError(status_code, raw_body or json.dumps(payload))
    try:
        envelope = ErrorEnvelope.model_validate(payload)
    except ValidationError:
        return HttpError(status_code, raw_body or json.dumps(payload))

    code = envelope.code or envelope.error_type
    message = f"{envelope.error_type}:{code}"
    if envelope.description:
        message = f"{message} - {envelope.description}"
    return ApiError(
        message,
        status_code=envelope.status_code or status_code,
        error_type=envelope.error_type,
        code=code,
        description=envelope.description,
        doc_url=envelope.doc_url,
        resolution=envelope.resolution,
        request_id=envelope.request_id,
    )


def resolve_error(status_code: int, body: bytes | str) -> ApiError:
    """Map a non-2xx body to :class:`ApiError`, or :class:`HttpError` if unparseable."""
    raw = _text(body)
    try:
        payload = _load_json(body)
    except ValueError:
        return HttpError(status_code, raw)
    return error_from_payload(status_code, payload, raw)


# ---------------------------------------------------------------------------
# Single responses
# ---------------------------------------------------------------------------


def _validate(shape: type[T], payload: Any, status_code: int, raw_body: str) -> T:
    try:
        return shape.model_validate(payload)
    except ValidationError as exc:
        raise ParseError(
            f"Response does not match {shape.__name__}: {exc.error_count()} error(s)",
            status_code=status_code,
            raw_body=raw_body,
        ) from exc


def resolve(
    status_code: int,
    body: bytes | str,
    shape: type[T],
    headers: Mapping[str, str] | None = None,
) -> ApiResponse[T]:
    """Resolve a raw response into ``ApiResponse[shape]``.

    Raises :class:`ApiError` / :class:`HttpError` for non-2xx and
    :class:`ParseError` when a 2xx body does not fit *shape*.
    """
    if not _is_success(status_code):
        raise resolve_error(status_code, body)

    raw = _text(body)
    try:
        payload = _load_json(body)
    except ValueError as exc:
        raise ParseError(
            f"Invalid JSON in {shape.__name__} response", status_code=status_code, raw_body=raw
        ) from exc
    data = _validate(shape, payload, status_code, raw)
    return ApiResponse(data=data, meta=RequestMeta.from_headers(headers))


def resolve_response(response: httpx.Response, shape: type[T]) -> ApiResponse[T]:
    return resolve(response.status_code, response.content, shape, response.headers)


# ---------------------------------------------------------------------------
# Batch responses
# ---------------------------------------------------------------------------


def _resolve_entry(path: str, entry: Any) -> BatchResult:
    if not isinstance(entry, dict):
        return BatchResult(
            path=path,
            code=None,
            error=ParseError(f"Batch entry for {path} is not an object"),
        )

    code = entry.get("code")
    body = entry.get("body")
    raw_headers = entry.get("headers")
    if raw_headers is not None and not isinstance(raw_headers, Mapping):
        logger.debug("Ignoring non-object headers on batch entry for %s: %r", path, raw_headers)
        raw_headers = None
    meta = RequestMeta.from_headers(raw_headers)
    if not isinstance(code, int):
        return BatchResult(
            path=path,
            code=None,
            error=ParseError(f"Batch entry for {path} has no status code"),
            meta=meta,
        )

    raw = json.dumps(body)
    if not _is_success(code):
        return BatchResult(
            path=path, code=code, error=error_from_payload(code, body, raw), meta=meta
        )

    shape = shape_for_path(path)
    try:
        data = _validate(shape, body, code, raw)
    except ParseError as exc:
        return BatchResult(path=path, code=code, error=exc, meta=meta)
    return BatchResult(path=path, code=code, data=data, meta=meta)


def _batch_entries(payload: Any) -> list[Any] | None:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("responses"), list):
        entries: list[Any] = payload["responses"]
        return entries
    return None


def resolve_batch(
    status_code: int,
    body: bytes | str,
    requested_paths: Sequence[str],
    headers: Mapping[str, str] | None = None,
) -> list[BatchResult]:
    """Resolve a batch response into one :class:`BatchResult` per requested path.

    The outer response follows :func:`resolve` rules.  Each sub-response is
    then resolved on its own; failures are recorded on the result rather than
    raised, and results are ordered like *requested_paths*.
    """
    if not _is_success(status_code):
        raise resolve_error(status_code, body)

    raw = _text(body)
    try:
        payload = _load_json(body)
    except ValueError as exc:
        raise ParseError(
            "Invalid JSON in batch response", status_code=status_code, raw_body=raw
        ) from exc

    entries = _batch_entries(payload)
    if entries is None:
        raise ParseError(
            "Batch response has no responses list", status_code=status_code, raw_body=raw
        )

    outer_meta = RequestMeta.from_headers(headers)
    by_path: dict[str, list[Any]] = {}
    for entry in entries:
        entry_path = entry.get("path") if isinstance(entry, dict) else None
        if not isinstance(entry_path, str):
            logger.debug("Skipping batch entry without a path: %r", entry)
            continue
        by_path.setdefault(normalize_path(entry_path), []).append(entry)

    results: list[BatchResult] = []
    for path in requested_paths:
        key = normalize_path(path)
        pending = by_path.get(key)
        if not pending:
            results.append(
                BatchResult(
                    path=path,
                    code=None,
                    error=ParseError(f"Batch response has no entry for {path}"),
                    meta=outer_meta,
                )
            )
            continue
        result = _resolve_entry(path, pending.pop(0))
        if result.meta == RequestMeta():
            result = replace(result, meta=outer_meta)
        results.append(result)
    return results


def resolve_batch_response(
    response: httpx.Response, requested_paths: Sequence[str]
) -> list[BatchResult]:
    return resolve_batch(
        response.status_code, response.content, requested_paths, response.headers
    )
