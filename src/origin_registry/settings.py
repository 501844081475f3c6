"""
origin_registry.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_JWT_SECRET = "dev-secret-change-me"


class ExternalDeviceIdType(BaseModel):
    # Identifier schemes a device can be registered under (issuer id, smart meter id, ...).
    type: str
    required: bool = False
    autogenerated: bool = False


class Settings(BaseSettings):
    """
    Env-driven configuration shared by the API, services and clients.
    Nested values (lists, objects) are read from JSON-encoded env vars.
    """

    model_config = SettingsConfigDict(env_prefix="ORIGIN_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "origin-registry"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 3030

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "origin-registry"
    jwt_audience: str = "origin-api"
    jwt_secret: str = Field(default=DEV_JWT_SECRET, repr=False)
    access_token_ttl_minutes: int = Field(default=7 * 24 * 60, ge=1)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./origin.db"

    # Exchange account lookups; unset means deposit addresses come from the organization record.
    exchange_api_base_url: str | None = None
    exchange_timeout_seconds: float = 5.0

    # Device registration
    enabled_features: list[str] = Field(
        default_factory=lambda: [
            "devices",
            "certificates",
            "buyer",
            "certification_requests",
            "exchange",
        ]
    )
    power_display_unit: Literal["W", "kW", "MW"] = "kW"
    max_total_capacity_w: int = 5_000_000
    external_device_id_types: list[ExternalDeviceIdType] = Field(
        default_factory=lambda: [ExternalDeviceIdType(type="Issuer ID", autogenerated=True)]
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Every layer reads configuration through `Settings`; tests build their own
# instance and pass it to `api.app.create_app`.
