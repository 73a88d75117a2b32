"""
=============================================================================
Configuration Settings Module
=============================================================================

Pydantic-based settings management with environment variable support.
All configuration is loaded from .env file or environment variables.

STATE / CACHE NOTES:
--------------------
UNKNOWN_CHANNEL_POLICY decides what StateMerger does with an update that
names a channel the schema does not define ("raise" or "ignore").
CACHE_DEFAULT_TTL_SECONDS is the TTL given to nodes registered with
cache=True; unset means entries never expire.
=============================================================================
"""

from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # State merging
    # -------------------------------------------------------------------------
    unknown_channel_policy: Literal["raise", "ignore"] = "raise"

    # -------------------------------------------------------------------------
    # Node result cache
    # -------------------------------------------------------------------------
    cache_default_ttl_seconds: float | None = Field(default=None, ge=0)

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 8000


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
