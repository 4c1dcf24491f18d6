from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import SecretStr

from vehiclelink.api.errors import ConfigError
from vehiclelink.models.auth import (
    DEFAULT_REFRESH_TOKEN_LIFETIME,
    AccessCredential,
    AuthUrlOptions,
    ClientCredentials,
    Permission,
    ScopeBuilder,
    TokenData,
)
from vehiclelink.models.config import AppSettings


class TestPermission:
    def test_wire_value(self) -> None:
        assert Permission.READ_VEHICLE_INFO.value == "read_vehicle_info"
        assert str(Permission.CONTROL_SECURITY) == "control_security"

    def test_compared_by_value(self) -> None:
        assert Permission("read_location") is Permission.READ_LOCATION

    def test_unknown_value_rejected(self) -> None:
        with pytest.raises(ValueError):
            Permission("read_everything")


class TestScopeBuilder:
    def test_empty(self) -> None:
        scope = ScopeBuilder()
        assert scope.query_value == ""
        assert len(scope) == 0

    def test_query_value_space_separated(self) -> None:
        scope = (
            ScopeBuilder()
            .add_permission(Permission.READ_ENGINE_OIL)
            .add_permission(Permission.READ_FUEL)
            .add_permission(Permission.READ_VIN)
        )
        assert scope.query_value == "read_engine_oil read_fuel read_vin"
        assert str(scope) == scope.query_value

    def test_add_is_idempotent(self) -> None:
        scope = (
            ScopeBuilder()
            .add_permission(Permission.READ_ODOMETER)
            .add_permission(Permission.READ_ODOMETER)
        )
        assert scope.query_value == "read_odometer"
        assert len(scope) == 1

    def test_add_returns_new_builder(self) -> None:
        base = ScopeBuilder().add_permission(Permission.READ_VIN)
        extended = base.add_permission(Permission.READ_TIRES)
        assert list(base) == [Permission.READ_VIN]
        assert list(extended) == [Permission.READ_VIN, Permission.READ_TIRES]

    def test_constructor_dedupes(self) -> None:
        scope = ScopeBuilder([Permission.READ_FUEL, Permission.READ_FUEL, Permission.READ_VIN])
        assert scope.query_value == "read_fuel read_vin"

    def test_same_set_any_order_is_equal(self) -> None:
        a = ScopeBuilder([Permission.READ_FUEL, Permission.READ_VIN])
        b = ScopeBuilder([Permission.READ_VIN, Permission.READ_FUEL])
        assert a == b
        assert sorted(a.query_value.split(" ")) == sorted(b.query_value.split(" "))

    def test_with_all_permissions(self) -> None:
        scope = ScopeBuilder.with_all_permissions()
        tokens = scope.query_value.split(" ")
        assert len(tokens) == len(Permission)
        assert set(tokens) == {p.value for p in Permission}
        assert tokens[0] == "read_engine_oil"
        assert tokens[-1] == "read_vin"

    def test_add_permissions(self) -> None:
        scope = ScopeBuilder().add_permissions([Permission.READ_CHARGE, Permission.CONTROL_CHARGE])
        assert Permission.CONTROL_CHARGE in scope
        assert Permission.READ_LOCATION not in scope


class TestAuthUrlOptions:
    def test_defaults_produce_no_params(self) -> None:
        assert AuthUrlOptions().query_params() == []

    def test_all_options(self) -> None:
        options = (
            AuthUrlOptions()
            .with_force_prompt()
            .with_state("no-michael-no-no-michael")
            .with_make_bypass("mercedes")
            .with_single_select_vin("THATISSONOTRIGHT")
        )
        assert options.query_params() == [
            ("approval_prompt", "force"),
            ("state", "no-michael-no-no-michael"),
            ("make", "mercedes"),
            ("single_select", "true"),
            ("single_select_vin", "THATISSONOTRIGHT"),
        ]

    def test_force_prompt_false_means_auto(self) -> None:
        params = AuthUrlOptions(force_prompt=False).query_params()
        assert params == [("approval_prompt", "auto")]

    def test_single_select_without_vin(self) -> None:
        assert AuthUrlOptions(single_select=False).query_params() == [("single_select", "false")]

    def test_flags_joined(self) -> None:
        options = AuthUrlOptions().with_flags({"country": "DE"}).with_flags({"beta": "true"})
        assert options.query_params() == [("flags", "country:DE,beta:true")]

    def test_with_returns_copy(self) -> None:
        base = AuthUrlOptions()
        changed = base.with_state("xyz")
        assert base.state is None
        assert changed.state == "xyz"

    def test_frozen(self) -> None:
        with pytest.raises(ValueError):
            AuthUrlOptions().state = "nope"  # type: ignore[misc]


class TestClientCredentials:
    def test_secret_not_in_repr(self, credentials: ClientCredentials) -> None:
        assert "test-client-secret" not in repr(credentials)
        assert credentials.client_secret.get_secret_value() == "test-client-secret"

    def test_from_settings(self) -> None:
        settings = AppSettings(
            client_id="cid",
            client_secret=SecretStr("csec"),
            redirect_uri="https://example.com/cb",
            test_mode=True,
        )
        creds = ClientCredentials.from_settings(settings)
        assert creds.client_id == "cid"
        assert creds.test_mode is True

    def test_from_settings_missing_fields(self) -> None:
        settings = AppSettings(client_id="cid", client_secret=None, redirect_uri=None)
        with pytest.raises(ConfigError, match="SMARTCAR_CLIENT_SECRET, SMARTCAR_REDIRECT_URI"):
            ClientCredentials.from_settings(settings)


class TestAccessCredential:
    def test_from_token_data(self) -> None:
        received = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        token = TokenData(
            access_token="AT",
            refresh_token="RT",
            expires_in=7200,
            refresh_token_expires_in=5184000,
        )
        cred = AccessCredential.from_token_data(token, received)
        assert cred.access_token == "AT"
        assert cred.refresh_token == "RT"
        assert cred.access_token_expires_at == received + timedelta(hours=2)
        assert cred.refresh_token_expires_at == received + timedelta(days=60)

    def test_missing_refresh_lifetime_uses_default(self) -> None:
        received = datetime(2024, 1, 1, tzinfo=UTC)
        token = TokenData(access_token="AT", refresh_token="RT", expires_in=7200)
        cred = AccessCredential.from_token_data(token, received)
        assert cred.refresh_token_expires_at == received + DEFAULT_REFRESH_TOKEN_LIFETIME
        assert cred.refresh_token_expires_at > cred.access_token_expires_at

    def test_expiry_helpers(self) -> None:
        received = datetime(2024, 1, 1, tzinfo=UTC)
        token = TokenData(access_token="AT", refresh_token="RT", expires_in=60)
        cred = AccessCredential.from_token_data(token, received)
        assert not cred.access_token_expired(received + timedelta(seconds=59))
        assert cred.access_token_expired(received + timedelta(seconds=60))
        assert not cred.refresh_token_expired(received + timedelta(days=1))

    def test_tokens_hidden_from_repr(self) -> None:
        token = TokenData(access_token="secret-at", refresh_token="secret-rt", expires_in=60)
        cred = AccessCredential.from_token_data(token)
        assert "secret-at" not in repr(cred)
        assert "secret-rt" not in repr(cred)

    def test_json_round_trip(self) -> None:
        token = TokenData(access_token="AT", refresh_token="RT", expires_in=60)
        cred = AccessCredential.from_token_data(token)
        restored = AccessCredential.model_validate_json(cred.model_dump_json())
        assert restored == cred
