"""
Application settings using Pydantic.

Provides environment-based configuration loading with ENVFLEET_ prefix.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Platform API
    target: str | None = None
    token: str | None = None
    api_version: str = "1.0"

    # HTTP client settings
    http_timeout: float = 30.0

    # Local configuration file (overrides the search path)
    config_file: str | None = None

    # Logging
    log_level: str = "WARNING"
    log_json: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "ENVFLEET_"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
