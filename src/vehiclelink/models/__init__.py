from __future__ import annotations

from vehiclelink.models.auth import (
    API_ORIGIN,
    CONNECT_URL,
    TOKEN_URL,
    AccessCredential,
    AuthUrlOptions,
    ClientCredentials,
    Permission,
    ScopeBuilder,
    TokenData,
)
from vehiclelink.models.config import AppSettings
from vehiclelink.models.response import ApiResponse, BatchResult, ErrorEnvelope, RequestMeta
from vehiclelink.models.vehicle import (
    Action,
    ApplicationPermissions,
    BatteryCapacity,
    BatteryLevel,
    Capability,
    ChargingStatus,
    Compatibility,
    EngineOilLife,
    FuelTank,
    Location,
    Odometer,
    Paging,
    RawBody,
    Status,
    Subscribe,
    TirePressure,
    User,
    VehicleAttributes,
    Vehicles,
    Vin,
)

__all__ = [
    # auth
    "API_ORIGIN",
    "CONNECT_URL",
    "TOKEN_URL",
    "AccessCredential",
    "AuthUrlOptions",
    "ClientCredentials",
    "Permission",
    "ScopeBuilder",
    "TokenData",
    # config
    "AppSettings",
    # response
    "ApiResponse",
    "BatchResult",
    "ErrorEnvelope",
    "RequestMeta",
    # vehicle
    "Action",
    "ApplicationPermissions",
    "BatteryCapacity",
    "BatteryLevel",
    "Capability",
    "ChargingStatus",
    "Compatibility",
    "EngineOilLife",
    "FuelTank",
    "Location",
    "Odometer",
    "Paging",
    "RawBody",
    "Status",
    "Subscribe",
    "TirePressure",
    "User",
    "VehicleAttributes",
    "Vehicles",
    "Vin",
]
