"""
Configuration file loading and saving.

Search order:
1. Explicit path (ENVFLEET_CONFIG_FILE or the --config flag)
2. .envfleet/config.yaml (project root)
3. ~/.envfleet/config.yaml (user home)

The file holds the platform target, the image registry and the ordered
catalog of environments. JSON files are accepted too, since JSON is a
subset of YAML.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

from envfleet.core.errors import ConfigurationError

logger = structlog.get_logger()

CONFIG_ERROR_MESSAGE = (
    "unable to load environments file, please make sure that envfleet is properly configured"
)


@dataclass(frozen=True)
class EnvironmentConfig:
    """One environment entry as stored in the config file."""

    name: str
    dns_suffix: str


@dataclass
class Config:
    """Configuration for the envfleet command line."""

    target: str = ""
    registry: str = ""
    envs: list[EnvironmentConfig] = field(default_factory=list)
    path: Path | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "registry": self.registry,
            "envs": [{"name": env.name, "dnsSuffix": env.dns_suffix} for env in self.envs],
        }

    def save(self, path: str | Path | None = None) -> Path:
        """Save configuration to file."""
        target_path = Path(path) if path else (self.path or default_config_path())
        target_path.parent.mkdir(parents=True, exist_ok=True)

        with open(target_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

        self.path = target_path
        return target_path


def default_config_path() -> Path:
    """Config file location used when writing a fresh configuration."""
    return Path.home() / ".envfleet" / "config.yaml"


def get_config_path(explicit_path: str | Path | None = None) -> Path | None:
    """
    Find the configuration file to use.

    Returns:
        Path to config file or None if not found
    """
    if explicit_path:
        path = Path(explicit_path)
        if path.exists():
            return path
        return None

    cwd_config = Path.cwd() / ".envfleet" / "config.yaml"
    if cwd_config.exists():
        return cwd_config

    home_config = default_config_path()
    if home_config.exists():
        return home_config

    return None


def parse_config(data: Any) -> Config:
    """Build a Config from the decoded YAML/JSON document."""
    if not isinstance(data, dict):
        raise ConfigurationError(CONFIG_ERROR_MESSAGE, details={"reason": "not a mapping"})

    envs = []
    for raw in data.get("envs") or []:
        try:
            envs.append(EnvironmentConfig(name=str(raw["name"]), dns_suffix=str(raw["dnsSuffix"])))
        except (KeyError, TypeError) as exc:
            raise ConfigurationError(
                CONFIG_ERROR_MESSAGE, details={"reason": f"invalid environment entry: {raw!r}"}
            ) from exc

    return Config(
        target=data.get("target") or "",
        registry=data.get("registry") or "",
        envs=envs,
    )


def load_config(explicit_path: str | Path | None = None) -> Config:
    """
    Load the configuration file.

    Raises:
        ConfigurationError: if no file is found or it cannot be parsed
    """
    path = get_config_path(explicit_path)
    if path is None:
        logger.debug("config_not_found", explicit_path=str(explicit_path) if explicit_path else None)
        raise ConfigurationError(CONFIG_ERROR_MESSAGE)

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("config_unreadable", path=str(path), error=str(exc))
        raise ConfigurationError(CONFIG_ERROR_MESSAGE, details={"path": str(path)}) from exc

    config = parse_config(data)
    config.path = path
    return config
