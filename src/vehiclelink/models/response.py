"""Response envelopes: per-request metadata, error bodies, and batch results."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from vehiclelink.api.errors import VehicleLinkError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

REQUEST_ID_HEADER = "sc-request-id"
UNIT_SYSTEM_HEADER = "sc-unit-system"
DATA_AGE_HEADER = "sc-data-age"


class RequestMeta(BaseModel):
    """Diagnostic metadata the provider attaches to a response."""

    model_config = ConfigDict(frozen=True)

    request_id: str | None = None
    unit_system: str | None = None
    data_age: datetime | None = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str] | None) -> RequestMeta:
        if not isinstance(headers, Mapping) or not headers:
            return cls()
        lowered = {str(k).lower(): str(v) for k, v in headers.items()}
        return cls(
            request_id=lowered.get(REQUEST_ID_HEADER),
            unit_system=lowered.get(UNIT_SYSTEM_HEADER),
            data_age=_parse_data_age(lowered.get(DATA_AGE_HEADER)),
        )


def _parse_data_age(raw: str | None) -> datetime | None:
    if raw is None:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        logger.debug("Ignoring unparseable %s header: %r", DATA_AGE_HEADER, raw)
        return None


class ErrorEnvelope(BaseModel):
    """Standard error body of the vehicle API (v2)."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    error_type: str = Field(alias="type")
    code: str | None = None
    description: str | None = None
    doc_url: str | None = Field(default=None, alias="docURL")
    status_code: int | None = Field(default=None, alias="statusCode")
    resolution: dict[str, Any] | None = None
    request_id: str | None = Field(default=None, alias="requestId")


@dataclass(frozen=True, slots=True)
class ApiResponse(Generic[T]):
    """A resolved 2xx response: typed body plus request metadata."""

    data: T
    meta: RequestMeta


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Outcome of one sub-request inside a batch call.

    Exactly one of ``data`` and ``error`` is set.  The type of ``data`` is
    fixed by ``path``, not by the shape of the returned JSON.
    """

    path: str
    code: int | None
    data: BaseModel | None = None
    error: VehicleLinkError | None = None
    meta: RequestMeta = field(default_factory=RequestMeta)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> BaseModel:
        """Return ``data`` or raise the recorded error."""
        if self.error is not None:
            raise self.error
        return self.data  # type: ignore[return-value]
