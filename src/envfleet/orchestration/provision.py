"""
Project provisioning.

Creates one app per target environment and points each app's CNAME at
``{project}.{dns_suffix}``. The platform has no multi-app transactions, so a
failure part-way through deletes every app this run created before the
error is raised.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import structlog

from envfleet.clients.platform import PlatformError, ResourceClient
from envfleet.core.errors import MissingNameError, ProvisionError, ValidationError
from envfleet.environments import Environment, EnvironmentSet
from envfleet.logging import bind_context
from envfleet.orchestration.results import CreatedApp

logger = structlog.get_logger()


def rollback(client: ResourceClient, apps: Iterable[CreatedApp]) -> None:
    """Best-effort deletion of apps; delete failures are never raised."""
    for app in apps:
        try:
            client.delete_app(app.name)
        except PlatformError as exc:
            logger.debug("rollback_delete_failed", app=app.name, error=str(exc))
        else:
            logger.debug("rollback_deleted", app=app.name)


class ProvisionOrchestrator:
    """Creates the apps of a project, all or nothing."""

    def __init__(self, client: ResourceClient, environments: EnvironmentSet) -> None:
        self.client = client
        self.environments = environments

    def provision(
        self,
        project: str,
        *,
        platform: str,
        envs: Sequence[str],
        team: str = "",
        plan: str = "",
        description: str = "",
    ) -> list[CreatedApp]:
        """
        Create and address the apps of ``project`` in ``envs``.

        Args:
            project: Project name
            platform: Platform (language runtime) of every app
            envs: Target environments, processed in the given order
            team: Team owning the apps
            plan: Plan of every app
            description: Description of every app

        Returns:
            The created apps, in environment order

        Raises:
            MissingNameError: project or platform missing
            InvalidEnvironmentError: an environment is not in the catalog
            ProvisionError: a remote call failed (after rollback)
        """
        if not project or not platform:
            raise MissingNameError("please provide the name and the platform")
        targets = self.environments.select(list(dict.fromkeys(envs)))
        if not targets:
            raise ValidationError("please provide at least one environment")

        log = bind_context(project=project)
        created = self._create_apps(project, targets, platform, team, plan, description)
        try:
            self._set_cnames(created)
        except PlatformError as exc:
            log.info("provision_rolling_back", stage="cname", apps=[a.name for a in created])
            rollback(self.client, created)
            raise ProvisionError(
                f'failed to configure project "{project}": {exc}', cause=exc
            ) from exc

        log.info("project_provisioned", envs=[a.env for a in created])
        return created

    def _create_apps(
        self,
        project: str,
        targets: Sequence[Environment],
        platform: str,
        team: str,
        plan: str,
        description: str,
    ) -> list[CreatedApp]:
        created: list[CreatedApp] = []
        for env in targets:
            app_name = env.app_name(project)
            try:
                payload = self.client.create_app(
                    app_name,
                    platform=platform,
                    plan=plan,
                    team=team,
                    pool=env.pool_name,
                    description=description,
                )
            except PlatformError as exc:
                logger.info("provision_rolling_back", stage="create", env=env.name, apps=[a.name for a in created])
                rollback(self.client, created)
                raise ProvisionError(
                    f'failed to create the project in env "{env.name}": {exc}',
                    env=env.name,
                    cause=exc,
                ) from exc
            logger.debug("app_created", app=app_name, env=env.name)
            created.append(
                CreatedApp(
                    name=app_name,
                    env=env.name,
                    address=env.address(project),
                    repository_url=payload.get("repository_url", ""),
                )
            )
        return created

    def _set_cnames(self, created: Sequence[CreatedApp]) -> None:
        for app in created:
            self.client.add_cname(app.name, app.address)
            logger.debug("cname_added", app=app.name, cname=app.address)
