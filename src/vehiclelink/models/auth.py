from __future__ import annotations

from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from vehiclelink.api.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from vehiclelink.models.config import AppSettings

# ---------------------------------------------------------------------------
# Endpoint constants
# ---------------------------------------------------------------------------

CONNECT_URL: str = "https://connect.smartcar.com"
AUTHORIZE_PATH: str = "/oauth/authorize"
TOKEN_URL: str = "https://auth.smartcar.com/oauth/token"
API_ORIGIN: str = "https://api.smartcar.com"
API_VERSION: str = "2.0"

# Documented refresh-token lifetime, used when the token response omits it.
DEFAULT_REFRESH_TOKEN_LIFETIME: timedelta = timedelta(days=60)

# ---------------------------------------------------------------------------
# Permissions / scope
# ---------------------------------------------------------------------------


class Permission(StrEnum):
    """A capability the application asks the vehicle owner to grant."""

    READ_ENGINE_OIL = "read_engine_oil"
    READ_BATTERY = "read_battery"
    READ_CHARGE = "read_charge"
    CONTROL_CHARGE = "control_charge"
    READ_THERMOMETER = "read_thermometer"
    READ_FUEL = "read_fuel"
    READ_LOCATION = "read_location"
    CONTROL_SECURITY = "control_security"
    READ_ODOMETER = "read_odometer"
    READ_TIRES = "read_tires"
    READ_VEHICLE_INFO = "read_vehicle_info"
    READ_VIN = "read_vin"


class ScopeBuilder:
    """Immutable, insertion-ordered set of :class:`Permission` values.

    Every ``add_*`` call returns a new builder; the receiver is never mutated.
    """

    __slots__ = ("_permissions",)

    def __init__(self, permissions: Iterable[Permission] = ()) -> None:
        self._permissions: tuple[Permission, ...] = tuple(
            dict.fromkeys(Permission(p) for p in permissions)
        )

    @classmethod
    def with_all_permissions(cls) -> ScopeBuilder:
        return cls(Permission)

    def add_permission(self, permission: Permission) -> ScopeBuilder:
        if permission in self._permissions:
            return self
        return ScopeBuilder((*self._permissions, permission))

    def add_permissions(self, permissions: Iterable[Permission]) -> ScopeBuilder:
        return ScopeBuilder((*self._permissions, *permissions))

    @property
    def permissions(self) -> tuple[Permission, ...]:
        return self._permissions

    @property
    def query_value(self) -> str:
        """Space-separated wire form used as the ``scope`` query parameter."""
        return " ".join(p.value for p in self._permissions)

    def __str__(self) -> str:
        return self.query_value

    def __repr__(self) -> str:
        return f"ScopeBuilder({self.query_value!r})"

    def __iter__(self) -> Iterator[Permission]:
        return iter(self._permissions)

    def __len__(self) -> int:
        return len(self._permissions)

    def __contains__(self, item: object) -> bool:
        return item in self._permissions

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScopeBuilder):
            return NotImplemented
        return set(self._permissions) == set(other._permissions)

    def __hash__(self) -> int:
        return hash(frozenset(self._permissions))


# ---------------------------------------------------------------------------
# Connect URL options
# ---------------------------------------------------------------------------


class AuthUrlOptions(BaseModel):
    """Optional Connect parameters; ``None`` means "let the provider decide"."""

    model_config = ConfigDict(frozen=True)

    force_prompt: bool | None = None
    state: str | None = None
    make_bypass: str | None = None
    single_select: bool | None = None
    single_select_vin: str | None = None
    flags: dict[str, str] | None = None

    def with_force_prompt(self, enabled: bool = True) -> AuthUrlOptions:
        return self.model_copy(update={"force_prompt": enabled})

    def with_state(self, state: str) -> AuthUrlOptions:
        return self.model_copy(update={"state": state})

    def with_make_bypass(self, make: str) -> AuthUrlOptions:
        return self.model_copy(update={"make_bypass": make})

    def with_single_select(self, enabled: bool = True) -> AuthUrlOptions:
        return self.model_copy(update={"single_select": enabled})

    def with_single_select_vin(self, vin: str) -> AuthUrlOptions:
        return self.model_copy(update={"single_select_vin": vin})

    def with_flags(self, flags: dict[str, str]) -> AuthUrlOptions:
        merged = {**(self.flags or {}), **flags}
        return self.model_copy(update={"flags": merged})

    def query_params(self) -> list[tuple[str, str]]:
        """Return the query pairs for every option that was set."""
        params: list[tuple[str, str]] = []
        if self.force_prompt is not None:
            params.append(("approval_prompt", "force" if self.force_prompt else "auto"))
        if self.state is not None:
            params.append(("state", self.state))
        if self.make_bypass is not None:
            params.append(("make", self.make_bypass))
        if self.single_select_vin is not None:
            params.append(("single_select", "true"))
            params.append(("single_select_vin", self.single_select_vin))
        elif self.single_select is not None:
            params.append(("single_select", "true" if self.single_select else "false"))
        if self.flags:
            params.append(("flags", ",".join(f"{k}:{v}" for k, v in self.flags.items())))
        return params


# ---------------------------------------------------------------------------
# Client identity and tokens
# ---------------------------------------------------------------------------


class ClientCredentials(BaseModel):
    """Static application identity issued by the developer dashboard."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: SecretStr
    redirect_uri: str
    test_mode: bool = False

    @classmethod
    def from_settings(cls, settings: AppSettings) -> ClientCredentials:
        missing = [
            name
            for name in ("client_id", "client_secret", "redirect_uri")
            if not getattr(settings, name)
        ]
        if missing:
            env_names = ", ".join(f"SMARTCAR_{name.upper()}" for name in missing)
            raise ConfigError(f"Missing client configuration: set {env_names}")
        return cls(
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            redirect_uri=settings.redirect_uri,
            test_mode=settings.test_mode,
        )


class TokenData(BaseModel):
    """Raw token response from the OAuth token endpoint."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    refresh_token: str
    refresh_token_expires_in: int | None = None


class AccessCredential(BaseModel):
    """Access/refresh token pair with absolute expiry timestamps.

    Expiry values are advisory: a 401 ``invalid_grant`` from the provider is
    the authoritative signal that a token is no longer usable.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(repr=False)
    refresh_token: str = Field(repr=False)
    access_token_expires_at: datetime
    refresh_token_expires_at: datetime

    @classmethod
    def from_token_data(
        cls, token: TokenData, received_at: datetime | None = None
    ) -> AccessCredential:
        now = received_at or datetime.now(UTC)
        refresh_lifetime = (
            timedelta(seconds=token.refresh_token_expires_in)
            if token.refresh_token_expires_in is not None
            else DEFAULT_REFRESH_TOKEN_LIFETIME
        )
        return cls(
            access_token=token.access_token,
            refresh_token=token.refresh_token,
            access_token_expires_at=now + timedelta(seconds=token.expires_in),
            refresh_token_expires_at=now + refresh_lifetime,
        )

    def access_token_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(UTC)) >= self.access_token_expires_at

    def refresh_token_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(UTC)) >= self.refresh_token_expires_at
