"""
OkapiFlow Configuration

Environment-based configuration for the OkapiFlow persistence core.
"""
import logging
from functools import lru_cache
from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _app_version_from_package() -> str:
    """Read version from the installed distribution metadata."""
    try:
        from importlib.metadata import version
        return version("okapiflow")
    except Exception:
        pass
    return "0.0.0-unknown"


# Name and schema version of the embedded store. Bump the version whenever
# a collection or index is added; older code refuses to open a newer store.
DEFAULT_STORE_NAME: str = "okapiFlowDB"
DEFAULT_SCHEMA_VERSION: int = 4


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "OkapiFlow"
    app_version: str = _app_version_from_package()
    debug: bool = False

    # Embedded store
    # SQLite (default): sqlite+aiosqlite:///./okapiflow.db
    database_url: Optional[str] = None
    store_name: str = DEFAULT_STORE_NAME
    schema_version: int = DEFAULT_SCHEMA_VERSION

    # Session timer polling interval (seconds)
    clock_tick_seconds: float = 1.0

    @model_validator(mode="after")
    def _check_tick_interval(self) -> "Settings":
        """Fall back to one-second ticks when the interval is not positive."""
        if self.clock_tick_seconds <= 0:
            logging.getLogger(__name__).warning(
                "OKAPIFLOW_CLOCK_TICK_SECONDS must be positive; using 1.0"
            )
            self.clock_tick_seconds = 1.0
        return self

    model_config = SettingsConfigDict(
        env_prefix="OKAPIFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience access
settings = get_settings()
