"""Configuration management for the application."""
from __future__ import annotations

import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from utils.errors import ConfigError

DEFAULT_TABLE_NAME = "responses"
DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_LOG_LEVEL = "INFO"

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Process-wide settings, read once at startup and passed to handlers."""

    model_config = ConfigDict(frozen=True)

    airtable_token: Optional[str] = None
    airtable_base_id: Optional[str] = None
    table_name: str = DEFAULT_TABLE_NAME
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    follow_pagination: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from the environment (or any mapping, for tests)."""
        env = os.environ if environ is None else environ
        raw_port = env.get("PORT") or DEFAULT_PORT
        try:
            port = int(raw_port)
        except ValueError:
            raise ConfigError(f"PORT must be an integer, got {raw_port!r}") from None
        return cls(
            airtable_token=env.get("AIRTABLE_TOKEN") or None,
            airtable_base_id=env.get("AIRTABLE_BASE_ID") or None,
            table_name=env.get("TABLE_NAME") or DEFAULT_TABLE_NAME,
            port=port,
            host=env.get("HOST") or DEFAULT_HOST,
            follow_pagination=(env.get("AIRTABLE_FOLLOW_PAGINATION", "").strip().lower() in _TRUTHY),
            log_level=env.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL,
        )

    def require_token(self) -> str:
        if not self.airtable_token:
            raise ConfigError("AIRTABLE_TOKEN environment variable is required")
        return self.airtable_token

    def require_base_id(self) -> str:
        if not self.airtable_base_id:
            raise ConfigError("AIRTABLE_BASE_ID environment variable is required")
        return self.airtable_base_id

    @property
    def has_credentials(self) -> bool:
        return bool(self.airtable_token and self.airtable_base_id)


def load_settings() -> Settings:
    """Load `.env` (if present) and read settings from the environment."""
    load_dotenv()
    return Settings.from_env()
