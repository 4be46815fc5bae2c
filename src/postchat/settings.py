"""
postchat.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for process entrypoints.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration (prefix `POSTCHAT_`).
    Defaults are safe for local dev; prod must override `jwt_secret`.
    """

    model_config = SettingsConfigDict(env_prefix="POSTCHAT_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "postchat"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "postchat"
    jwt_audience: str = "postchat-api"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    jwt_ttl_minutes: int = 7 * 24 * 60

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./postchat.db"

    # HTTP surface
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    static_dir: str = "public"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars on repeated lookups.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Request handlers read the settings bound to the running app (`app.state.settings`),
# so tests can build apps with their own Settings without touching the cache.
