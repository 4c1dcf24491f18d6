"""User-level API operations (not tied to a single vehicle)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from vehiclelink.api.resolver import resolve_response
from vehiclelink.models.vehicle import User, Vehicles

if TYPE_CHECKING:
    from vehiclelink.api.client import ApiClient
    from vehiclelink.models.auth import AccessCredential
    from vehiclelink.models.response import ApiResponse


class UserAPI:
    """Operations scoped to the user who granted access."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def vehicles(
        self,
        access_token: str | AccessCredential,
        *,
        limit: int | None = None,
        offset: int | None = None,
    ) -> ApiResponse[Vehicles]:
        """Return the ids of vehicles the user connected, with paging info."""
        resp = await self._client.get(
            "/vehicles",
            access_token=access_token,
            params={"limit": limit, "offset": offset},
        )
        return resolve_response(resp, Vehicles)

    async def user(self, access_token: str | AccessCredential) -> ApiResponse[User]:
        """Return the id of the vehicle owner behind *access_token*."""
        resp = await self._client.get("/user", access_token=access_token)
        return resolve_response(resp, User)
