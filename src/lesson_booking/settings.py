"""
lesson_booking.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Resolve the database URL, preferring a connection properties file when one is configured.
- Offer a cached settings instance for the process entrypoint.
"""

from __future__ import annotations

import enum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from lesson_booking.db.properties import load_database_properties


class InventoryMode(enum.StrEnum):
    # How order placement applies inventory deductions (see services.order_service).
    legacy = "legacy"
    guarded = "guarded"
    transactional = "transactional"


class Settings(BaseSettings):
    """
    - Env-driven configuration (prefix LESSONS_)
    - Defaults safe for local dev
    - Single settings object stored on app.state and injected across layers
    """

    model_config = SettingsConfigDict(env_prefix="LESSONS_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables and seeding.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "lesson-booking"
    log_level: str = "INFO"
    log_json: bool = True

    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./lessons.db"
    db_properties_file: Path | None = None

    # Orders
    inventory_mode: InventoryMode = InventoryMode.legacy

    # HTTP extras
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    images_dir: Path | None = None
    seed_file: Path | None = None

    def resolved_database_url(self) -> str:
        # The properties file wins over database_url; it is read once per call site (startup).
        if self.db_properties_file is None:
            return self.database_url
        return load_database_properties(self.db_properties_file).url()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars when the entrypoint asks more than once.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Request handlers read settings from app.state (see api.deps) so tests can build
# apps with explicit Settings objects instead of patching the environment.
