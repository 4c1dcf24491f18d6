from __future__ import annotations

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from vehiclelink.models.auth import API_ORIGIN, CONNECT_URL, TOKEN_URL


class AppSettings(BaseSettings):
    """Client settings populated from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SMARTCAR_",
        extra="ignore",
    )

    client_id: str | None = None
    client_secret: SecretStr | None = None
    redirect_uri: str | None = None
    test_mode: bool = False
    api_origin: str = API_ORIGIN
    auth_origin: str = TOKEN_URL
    connect_url: str = CONNECT_URL
