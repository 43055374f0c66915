"""Environment variable CLI commands: envvar-set, envvar-unset, envvar-get."""

from __future__ import annotations

import sys
from typing import Sequence

from envfleet.cli.session import platform_session
from envfleet.core.errors import MissingNameError, main_with_error_handling
from envfleet.orchestration import EnvVarManager, parse_env_assignments


@main_with_error_handling()
def envvar_set_command(
    name: str,
    assignments: Sequence[str],
    envs: Sequence[str] | None = None,
    private: bool = False,
    no_restart: bool = False,
    config_file: str | None = None,
) -> int:
    """Set NAME=value variables in the project's environments."""
    if not name:
        raise MissingNameError()
    variables = parse_env_assignments(assignments)
    with platform_session(config_file) as (client, environments):
        EnvVarManager(client, environments, out=sys.stdout).set(
            name, variables, envs, private=private, no_restart=no_restart
        )
    return 0


@main_with_error_handling()
def envvar_unset_command(
    name: str,
    variables: Sequence[str],
    envs: Sequence[str] | None = None,
    no_restart: bool = False,
    config_file: str | None = None,
) -> int:
    """Unset variables in the project's environments."""
    if not name:
        raise MissingNameError()
    with platform_session(config_file) as (client, environments):
        EnvVarManager(client, environments, out=sys.stdout).unset(
            name, variables, envs, no_restart=no_restart
        )
    return 0


@main_with_error_handling()
def envvar_get_command(
    name: str,
    envs: Sequence[str] | None = None,
    config_file: str | None = None,
) -> int:
    """Print the variables of the project's environments."""
    if not name:
        raise MissingNameError()
    with platform_session(config_file) as (client, environments):
        EnvVarManager(client, environments, out=sys.stdout).get(name, envs)
    return 0
