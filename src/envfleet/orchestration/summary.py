"""
Read-only views of projects.

Builds the per-project summary (header plus one row per environment), the
detail of one environment's app and the listing of every project on the
platform.
"""

from __future__ import annotations

import structlog

from envfleet.clients.platform import App, PlatformError, ResourceClient, ResourceNotFoundError
from envfleet.core.errors import MissingNameError, ProjectNotFoundError, ProviderError
from envfleet.environments import EnvironmentSet
from envfleet.orchestration.discovery import discover_project
from envfleet.orchestration.results import EnvironmentRow, ProjectListing, ProjectSummary

logger = structlog.get_logger()


class ProjectSummaryBuilder:
    """Assembles project views from the apps of each environment."""

    def __init__(self, client: ResourceClient, environments: EnvironmentSet) -> None:
        self.client = client
        self.environments = environments

    def build(self, project: str) -> ProjectSummary:
        """
        Summarize ``project``.

        The header comes from the first member in discovery order, the rows
        follow catalog order. An app without deploys gets empty deploy
        columns.

        Raises:
            MissingNameError: empty project name
            ProjectNotFoundError: no app belongs to the project
            ProviderError: fetching an app or its last deploy failed
        """
        if not project:
            raise MissingNameError()

        members = discover_project(self.client, self.environments, project)
        details: dict[str, App] = {}
        rows: dict[str, EnvironmentRow] = {}
        for env_name, app in members:
            detail = self._call(self.client.get_app, app.name)
            deploy = self._call(self.client.last_deploy, app.name)
            details[env_name] = detail
            row = EnvironmentRow(
                env=env_name,
                address=self.environments.address_for(env_name, detail.cnames),
                units=detail.units,
            )
            if deploy is not None:
                row.image_tag = deploy.image_tag
                row.commit = deploy.commit
                row.deployed_at = deploy.timestamp
            rows[env_name] = row

        first = details[members[0][0]]
        return ProjectSummary(
            name=project,
            description=first.description,
            repository=first.repository_url,
            platform=first.platform,
            teams=first.teams,
            owner=first.owner,
            team_owner=first.team_owner,
            rows=[rows[env] for env in self.environments.ordered(rows)],
        )

    def environment_detail(self, project: str, env: str) -> App:
        """App of ``project`` in one environment."""
        if not project:
            raise MissingNameError()
        self.environments.validate([env])
        app_name = self.environments.app_name(project, env)
        try:
            return self.client.get_app(app_name)
        except ResourceNotFoundError as exc:
            raise ProjectNotFoundError(project) from exc
        except PlatformError as exc:
            raise ProviderError(f'failed to load app "{app_name}": {exc}') from exc

    def list_projects(self) -> list[ProjectListing]:
        """Every project on the platform, sorted by name.

        Apps whose name does not end in a catalog environment are skipped.
        """
        try:
            apps = self.client.list_apps()
        except PlatformError as exc:
            raise ProviderError(f"failed to list apps: {exc}") from exc

        grouped: dict[str, dict[str, str]] = {}
        for app in apps:
            found = self.environments.environment_for_app(app.name)
            if found is None:
                logger.debug("app_skipped", app=app.name)
                continue
            project, env = found
            grouped.setdefault(project, {})[env.name] = env.address_for(app.cnames)

        return [
            ProjectListing(
                name=project,
                envs=[(env, addresses[env]) for env in self.environments.ordered(addresses)],
            )
            for project, addresses in sorted(grouped.items())
        ]

    @staticmethod
    def _call(method, app_name):
        try:
            return method(app_name)
        except PlatformError as exc:
            raise ProviderError(f'failed to load app "{app_name}": {exc}') from exc
