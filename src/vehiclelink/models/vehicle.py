"""Response shapes of the vehicle-data API.

Field names follow Python conventions; the wire uses camelCase, mapped by an
alias generator.  Unknown fields are kept (``extra="allow"``) so newer
provider payloads still validate.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_WIRE = ConfigDict(extra="allow", alias_generator=to_camel, populate_by_name=True)


class Paging(BaseModel):
    model_config = _WIRE

    count: int
    offset: int


class Vehicles(BaseModel):
    """``GET /vehicles``: vehicle ids the user granted access to."""

    model_config = _WIRE

    vehicles: list[str]
    paging: Paging


class User(BaseModel):
    """``GET /user``"""

    model_config = _WIRE

    id: str


class VehicleAttributes(BaseModel):
    """``GET /vehicles/{id}``"""

    model_config = _WIRE

    id: str
    make: str
    model: str
    year: int


class ApplicationPermissions(BaseModel):
    """``GET /vehicles/{id}/permissions``"""

    model_config = _WIRE

    permissions: list[str]
    paging: Paging | None = None


class EngineOilLife(BaseModel):
    model_config = _WIRE

    life_remaining: float


class BatteryCapacity(BaseModel):
    model_config = _WIRE

    capacity: float


class BatteryLevel(BaseModel):
    model_config = _WIRE

    percent_remaining: float
    range: float


class ChargingStatus(BaseModel):
    model_config = _WIRE

    is_plugged_in: bool
    state: str


class FuelTank(BaseModel):
    model_config = _WIRE

    range: float
    percent_remaining: float
    amount_remaining: float


class Location(BaseModel):
    model_config = _WIRE

    latitude: float
    longitude: float


class Odometer(BaseModel):
    model_config = _WIRE

    distance: float


class TirePressure(BaseModel):
    model_config = _WIRE

    front_left: float
    front_right: float
    back_left: float
    back_right: float


class Vin(BaseModel):
    model_config = _WIRE

    vin: str


class Action(BaseModel):
    """Result of a vehicle command (lock/unlock, start/stop charge)."""

    model_config = _WIRE

    status: str
    message: str | None = None


class Status(BaseModel):
    """Result of a DELETE (disconnect)."""

    model_config = _WIRE

    status: str


class Subscribe(BaseModel):
    """Webhook subscription acknowledgement."""

    model_config = _WIRE

    webhook_id: str
    vehicle_id: str


class Capability(BaseModel):
    model_config = _WIRE

    permission: str
    endpoint: str
    capable: bool
    reason: str | None = None


class Compatibility(BaseModel):
    """``GET /compatibility``: whether a VIN supports the requested scope."""

    model_config = _WIRE

    compatible: bool
    reason: str | None = None
    capabilities: list[Capability] = []


class RawBody(BaseModel):
    """Catch-all body for batch paths without a dedicated shape."""

    model_config = ConfigDict(extra="allow")
