"""Bulk removal of a project from every environment."""

from __future__ import annotations

import sys
from typing import TextIO

import structlog

from envfleet.clients.platform import ResourceClient, ResourceNotFoundError
from envfleet.core.errors import BulkRemovalError, MissingNameError, ProjectNotFoundError
from envfleet.environments import EnvironmentSet
from envfleet.orchestration.fanout import run_per_environment

logger = structlog.get_logger()


class BulkRemover:
    """Deletes ``{project}-{env}`` in every catalog environment."""

    def __init__(
        self,
        client: ResourceClient,
        environments: EnvironmentSet,
        out: TextIO | None = None,
    ) -> None:
        self.client = client
        self.environments = environments
        self.out = out or sys.stdout

    def remove(self, project: str) -> list[str]:
        """
        Delete the project everywhere, one attempt per environment.

        Every environment is attempted even after failures. An environment
        where the app does not exist is reported as failed.

        Returns:
            Environments the project was deleted from, in catalog order

        Raises:
            MissingNameError: empty project name
            ProjectNotFoundError: the app was missing in every environment
            BulkRemovalError: at least one deletion failed
        """
        if not project:
            raise MissingNameError()

        envs = self.environments.names()
        failures = run_per_environment(
            envs,
            lambda env: self.client.delete_app(self.environments.app_name(project, env)),
            label=lambda env: f'Deleting from env "{env}"',
            out=self.out,
            event="app_deleted",
        )
        if not failures:
            logger.info("project_removed", project=project, envs=envs)
            return envs

        if len(failures) == len(envs) and all(
            isinstance(exc, ResourceNotFoundError) for exc in failures.values()
        ):
            raise ProjectNotFoundError(project)
        raise BulkRemovalError(project, failures)
