"""Wiring shared by the CLI commands: settings, config, catalog and client."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from envfleet.clients.platform import PlatformClient
from envfleet.config import Settings, get_settings, load_config
from envfleet.core.errors import ConfigurationError
from envfleet.environments import EnvironmentSet


@contextmanager
def platform_session(
    config_file: str | None = None,
    settings: Settings | None = None,
) -> Iterator[tuple[PlatformClient, EnvironmentSet]]:
    """
    Open a platform client together with the environment catalog.

    The target comes from ENVFLEET_TARGET when set, otherwise from the
    config file.

    Raises:
        ConfigurationError: config file missing/corrupt or no target known
    """
    settings = settings or get_settings()
    config = load_config(config_file or settings.config_file)
    target = settings.target or config.target
    if not target:
        raise ConfigurationError(
            "no target defined, please run envfleet target-set <url>",
            details={"path": str(config.path)},
        )

    client = PlatformClient(
        target,
        settings.token,
        api_version=settings.api_version,
        timeout=settings.http_timeout,
    )
    with client:
        yield client, EnvironmentSet.from_config(config)
