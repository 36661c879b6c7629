"""
role_hierarchy.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (JWT secret, registration API key).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    - Strict env-driven configuration (prefix `RHS_`)
    - Defaults safe for local dev
    - Single settings object injected across layers
    """

    model_config = SettingsConfigDict(env_prefix="RHS_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables and seeding.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "role-hierarchy-service"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "role-hierarchy-service"
    jwt_audience: str = "role-hierarchy-api"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    # "unverified" decodes bearer tokens without checking signatures; dev/test only.
    auth_mode: Literal["jwt", "unverified"] = "jwt"

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./role_hierarchy.db"

    # Hierarchy invariants
    root_role_id: str = "SYSTEM_ROOT"
    top_level_parent_id: str = "ROOT"
    root_admin_email: str = "root@system.app"
    root_admin_name: str = "Root Admin"

    # Paging / traversal
    default_page_limit: int = Field(default=50, ge=1)
    max_page_limit: int = Field(default=1000, ge=1)
    scan_page_size: int = Field(default=500, ge=1)
    traversal_concurrency: int = Field(default=8, ge=1)

    # Identity account store
    identity_store: Literal["memory", "http"] = "memory"
    identity_base_url: str = "http://localhost:9090"
    identity_timeout_seconds: float = 5.0

    # Pre-approved self registration; unset disables the endpoint.
    registration_api_key: str | None = Field(default=None, repr=False)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# The root role id, top-level sentinel and root-admin email are data invariants:
# changing them after the directory has been seeded orphans the seeded records.
