"""Project membership discovery."""

from __future__ import annotations

from envfleet.clients.platform import App, PlatformError, ResourceClient
from envfleet.core.errors import ProjectNotFoundError, ProviderError
from envfleet.environments import EnvironmentSet


def discover_project(
    client: ResourceClient,
    environments: EnvironmentSet,
    project: str,
) -> list[tuple[str, App]]:
    """
    Find the apps of ``project``, one per environment, in discovery order.

    Membership is derived from app names only: ``{project}-{env}`` with
    ``env`` in the catalog.

    Raises:
        ProjectNotFoundError: when no app belongs to the project
        ProviderError: when listing apps fails
    """
    try:
        apps = client.list_apps(name_pattern=f"^{project}")
    except PlatformError as exc:
        raise ProviderError(f"failed to list apps: {exc}") from exc

    by_name = {app.name: app for app in apps}
    members = [
        (env, by_name[environments.app_name(project, env)])
        for env in environments.project_environments(project, by_name)
    ]
    if not members:
        raise ProjectNotFoundError(project)
    return members
