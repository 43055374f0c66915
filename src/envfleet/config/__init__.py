"""
Configuration for envfleet.

Two layers:
- Settings: process settings from ENVFLEET_* environment variables
- Config: the environments file (target, registry, environment catalog)
"""

from envfleet.config.loader import (
    Config,
    EnvironmentConfig,
    get_config_path,
    load_config,
    parse_config,
)
from envfleet.config.settings import Settings, get_settings

__all__ = [
    "Config",
    "EnvironmentConfig",
    "Settings",
    "get_config_path",
    "get_settings",
    "load_config",
    "parse_config",
]
