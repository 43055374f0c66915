"""Environment variable management across the apps of a project."""

from __future__ import annotations

import sys
from typing import Iterable, Sequence, TextIO

import structlog

from envfleet.clients.platform import PlatformError, ResourceClient
from envfleet.core.errors import (
    InvalidEnvVarError,
    MissingNameError,
    PartialFailureError,
    ProviderError,
)
from envfleet.environments import EnvironmentSet
from envfleet.orchestration.fanout import run_per_environment

logger = structlog.get_logger()


def parse_env_assignments(args: Iterable[str]) -> dict[str, str]:
    """
    Parse ``NAME=value`` arguments.

    Surrounding double or single quotes around a value are stripped, so
    ``TEAM="some nice team"`` sets ``some nice team``.

    Raises:
        InvalidEnvVarError: an argument has no ``=`` or an empty name
    """
    envs: dict[str, str] = {}
    for arg in args:
        name, sep, value = arg.partition("=")
        if not sep or not name:
            raise InvalidEnvVarError()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        envs[name] = value
    return envs


class EnvVarManager:
    """Sets, unsets and reads variables in several environments of a project."""

    def __init__(
        self,
        client: ResourceClient,
        environments: EnvironmentSet,
        out: TextIO | None = None,
    ) -> None:
        self.client = client
        self.environments = environments
        self.out = out or sys.stdout

    def _targets(self, project: str, envs: Sequence[str] | None) -> list[str]:
        if not project:
            raise MissingNameError()
        if not envs:
            return self.environments.names()
        self.environments.validate(envs)
        return list(dict.fromkeys(envs))

    def set(
        self,
        project: str,
        variables: dict[str, str],
        envs: Sequence[str] | None = None,
        *,
        private: bool = False,
        no_restart: bool = False,
    ) -> None:
        """Set ``variables`` in every target environment.

        Raises:
            PartialFailureError: at least one environment failed
        """
        targets = self._targets(project, envs)
        if not variables:
            raise InvalidEnvVarError()
        failures = run_per_environment(
            targets,
            lambda env: self.client.set_env_vars(
                self.environments.app_name(project, env),
                variables,
                private=private,
                no_restart=no_restart,
            ),
            label=lambda env: f'setting variables in environment "{env}"',
            out=self.out,
            event="env_vars_set",
        )
        if failures:
            raise PartialFailureError.from_failures(f'set variables in project "{project}"', failures)

    def unset(
        self,
        project: str,
        names: Sequence[str],
        envs: Sequence[str] | None = None,
        *,
        no_restart: bool = False,
    ) -> None:
        """Unset ``names`` in every target environment.

        Raises:
            PartialFailureError: at least one environment failed
        """
        targets = self._targets(project, envs)
        if not names:
            raise InvalidEnvVarError("please provide the name of at least one variable")
        failures = run_per_environment(
            targets,
            lambda env: self.client.unset_env_vars(
                self.environments.app_name(project, env),
                names,
                no_restart=no_restart,
            ),
            label=lambda env: f'unsetting variables from environment "{env}"',
            out=self.out,
            event="env_vars_unset",
        )
        if failures:
            raise PartialFailureError.from_failures(f'unset variables in project "{project}"', failures)

    def get(self, project: str, envs: Sequence[str] | None = None) -> None:
        """Print the variables of each target environment.

        Stops at the first environment that fails; blocks already printed
        stay printed.

        Raises:
            ProviderError: reading an environment's variables failed
        """
        for env in self._targets(project, envs):
            app_name = self.environments.app_name(project, env)
            try:
                variables = self.client.get_env_vars(app_name)
            except PlatformError as exc:
                logger.info("env_vars_get_failed", app=app_name, error=str(exc))
                raise ProviderError(
                    f'failed to get variables from env "{env}": {exc}', details={"env": env}
                ) from exc
            lines = [f'variables in "{env}":', ""]
            for var in sorted(variables, key=lambda v: v.name):
                value = var.value if var.public else "*** (private variable)"
                lines.append(f" {var.name}={value}")
            self.out.write("\n".join(lines) + "\n\n\n")
            self.out.flush()
