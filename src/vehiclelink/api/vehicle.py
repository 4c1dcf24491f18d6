"""Vehicle-scoped operations built on top of ApiClient."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel

from vehiclelink.api.resolver import normalize_path, resolve_batch_response, resolve_response
from vehiclelink.models.vehicle import (
    Action,
    ApplicationPermissions,
    BatteryCapacity,
    BatteryLevel,
    ChargingStatus,
    EngineOilLife,
    FuelTank,
    Location,
    Odometer,
    Status,
    Subscribe,
    TirePressure,
    VehicleAttributes,
    Vin,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from vehiclelink.api.client import ApiClient
    from vehiclelink.models.auth import AccessCredential
    from vehiclelink.models.response import ApiResponse, BatchResult

T = TypeVar("T", bound=BaseModel)


class UnitSystem(StrEnum):
    METRIC = "metric"
    IMPERIAL = "imperial"


class VehicleAPI:
    """Vehicle-related API operations (composition over ApiClient).

    Every call takes the vehicle id and access token explicitly; the instance
    keeps no per-user state.
    """

    def __init__(self, client: ApiClient, *, unit_system: UnitSystem | None = None) -> None:
        self._client = client
        self._unit_system = unit_system

    def _headers(self) -> dict[str, str] | None:
        if self._unit_system is None:
            return None
        return {"SC-Unit-System": self._unit_system.value}

    @staticmethod
    def _path(vehicle_id: str, resource: str = "") -> str:
        return f"/vehicles/{vehicle_id}{resource}"

    async def _get(
        self,
        vehicle_id: str,
        resource: str,
        shape: type[T],
        access_token: str | AccessCredential,
        params: dict[str, Any] | None = None,
    ) -> ApiResponse[T]:
        resp = await self._client.get(
            self._path(vehicle_id, resource),
            access_token=access_token,
            params=params,
            headers=self._headers(),
        )
        return resolve_response(resp, shape)

    async def _action(
        self,
        vehicle_id: str,
        resource: str,
        action: str,
        access_token: str | AccessCredential,
    ) -> ApiResponse[Action]:
        resp = await self._client.post(
            self._path(vehicle_id, resource),
            access_token=access_token,
            json={"action": action},
            headers=self._headers(),
        )
        return resolve_response(resp, Action)

    # -- reads ---------------------------------------------------------------

    async def attributes(
        self, vehicle_id: str, access_token: str | AccessCredential
    ) -> ApiResponse[VehicleAttributes]:
        """Return make, model, year and id of the vehicle."""
        return await self._get(vehicle_id, "", VehicleAttributes, access_token)

    async def permissions(
        self,
        vehicle_id: str,
        access_token: str | AccessCredential,
        *,
        limit: int | None = None,
        offset: int | None = None,
    ) -> ApiResponse[ApplicationPermissions]:
        """Return the permissions granted to the application for this vehicle."""
        params = {"limit": limit, "offset": offset}
        return await self._get(
            vehicle_id, "/permissions", ApplicationPermissions, access_token, params
        )

    async def engine_oil(
        self, vehicle_id: str, access_token: str | AccessCredential
    ) -> ApiResponse[EngineOilLife]:
        return await self._get(vehicle_id, "/engine/oil", EngineOilLife, access_token)

    async def battery_capacity(
        self, vehicle_id: str, access_token: str | AccessCredential
    ) -> ApiResponse[BatteryCapacity]:
        return await self._get(vehicle_id, "/battery/capacity", BatteryCapacity, access_token)

    async def battery_level(
        self, vehicle_id: str, access_token: str | AccessCredential
    ) -> ApiResponse[BatteryLevel]:
        return await self._get(vehicle_id, "/battery", BatteryLevel, access_token)

    async def charging_status(
        self, vehicle_id: str, access_token: str | AccessCredential
    ) -> ApiResponse[ChargingStatus]:
        return await self._get(vehicle_id, "/charge", ChargingStatus, access_token)

    async def fuel_tank(
        self, vehicle_id: str, access_token: str | AccessCredential
    ) -> ApiResponse[FuelTank]:
        """Fuel tank status (US vehicles only)."""
        return await self._get(vehicle_id, "/fuel", FuelTank, access_token)

    async def location(
        self, vehicle_id: str, access_token: str | AccessCredential
    ) -> ApiResponse[Location]:
        return await self._get(vehicle_id, "/location", Location, access_token)

    async def odometer(
        self, vehicle_id: str, access_token: str | AccessCredential
    ) -> ApiResponse[Odometer]:
        return await self._get(vehicle_id, "/odometer", Odometer, access_token)

    async def tire_pressure(
        self, vehicle_id: str, access_token: str | AccessCredential
    ) -> ApiResponse[TirePressure]:
        return await self._get(vehicle_id, "/tires/pressure", TirePressure, access_token)

    async def vin(self, vehicle_id: str, access_token: str | AccessCredential) -> ApiResponse[Vin]:
        return await self._get(vehicle_id, "/vin", Vin, access_token)

    # -- commands ------------------------------------------------------------

    async def lock(
        self, vehicle_id: str, access_token: str | AccessCredential
    ) -> ApiResponse[Action]:
        return await self._action(vehicle_id, "/security", "LOCK", access_token)

    async def unlock(
        self, vehicle_id: str, access_token: str | AccessCredential
    ) -> ApiResponse[Action]:
        return await self._action(vehicle_id, "/security", "UNLOCK", access_token)

    async def start_charge(
        self, vehicle_id: str, access_token: str | AccessCredential
    ) -> ApiResponse[Action]:
        return await self._action(vehicle_id, "/charge", "START", access_token)

    async def stop_charge(
        self, vehicle_id: str, access_token: str | AccessCredential
    ) -> ApiResponse[Action]:
        return await self._action(vehicle_id, "/charge", "STOP", access_token)

    # -- batch ---------------------------------------------------------------

    async def batch(
        self,
        vehicle_id: str,
        paths: Sequence[str],
        access_token: str | AccessCredential,
    ) -> list[BatchResult]:
        """Fetch several resources in one request.

        Returns one :class:`BatchResult` per entry of *paths*, in the same
        order.  A failing sub-request is reported on its own result and does
        not raise; only a failure of the batch call itself raises.
        """
        requested = [normalize_path(p) for p in paths]
        resp = await self._client.post(
            self._path(vehicle_id, "/batch"),
            access_token=access_token,
            json={"requests": [{"path": p} for p in requested]},
            headers=self._headers(),
        )
        return resolve_batch_response(resp, requested)

    # -- application / webhooks ----------------------------------------------

    async def disconnect(
        self, vehicle_id: str, access_token: str | AccessCredential
    ) -> ApiResponse[Status]:
        """Revoke this application's access to the vehicle."""
        resp = await self._client.delete(
            self._path(vehicle_id, "/application"), access_token=access_token
        )
        return resolve_response(resp, Status)

    async def subscribe(
        self, vehicle_id: str, webhook_id: str, access_token: str | AccessCredential
    ) -> ApiResponse[Subscribe]:
        resp = await self._client.post(
            self._path(vehicle_id, f"/webhooks/{webhook_id}"), access_token=access_token
        )
        return resolve_response(resp, Subscribe)

    async def unsubscribe(
        self, vehicle_id: str, webhook_id: str, management_token: str
    ) -> ApiResponse[Status]:
        """Unsubscribe the vehicle from a webhook.

        Authenticated with the application management token from the
        developer dashboard, not a user access token.
        """
        resp = await self._client.delete(
            self._path(vehicle_id, f"/webhooks/{webhook_id}"), access_token=management_token
        )
        return resolve_response(resp, Status)
