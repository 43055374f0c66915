"""Project lifecycle CLI commands.

project-create, project-update, project-remove, project-info,
project-env-info and project-list.
"""

from __future__ import annotations

import sys
from typing import Sequence

from envfleet.cli.session import platform_session
from envfleet.cli.ux import console, confirm, info, print_key_value, print_table, success, warning
from envfleet.core.errors import MissingNameError, main_with_error_handling
from envfleet.orchestration import (
    BulkRemover,
    ProjectSummaryBuilder,
    ProvisionOrchestrator,
    ReconcileOrchestrator,
)


@main_with_error_handling()
def project_create_command(
    name: str,
    platform: str,
    envs: Sequence[str] | None = None,
    team: str = "",
    plan: str = "",
    description: str = "",
    config_file: str | None = None,
) -> int:
    """
    Create a project in the given environments (all of them by default).

    Returns:
        Exit code (0 for success)
    """
    with platform_session(config_file) as (client, environments):
        created = ProvisionOrchestrator(client, environments).provision(
            name,
            platform=platform,
            envs=list(envs) if envs else environments.names(),
            team=team,
            plan=plan,
            description=description,
        )

    print(f'successfully created the project "{name}"!')
    if created[0].repository_url:
        print(f"Git repository: {created[0].repository_url}")
    return 0


@main_with_error_handling()
def project_update_command(
    name: str,
    add_envs: Sequence[str] = (),
    remove_envs: Sequence[str] = (),
    description: str | None = None,
    team: str | None = None,
    plan: str | None = None,
    config_file: str | None = None,
) -> int:
    """Add/remove environments of a project and update its apps' metadata."""
    with platform_session(config_file) as (client, environments):
        result = ReconcileOrchestrator(client, environments, out=sys.stdout).reconcile(
            name,
            add=add_envs,
            remove=remove_envs,
            description=description,
            team=team,
            plan=plan,
        )

    for app in result.added:
        console.print(f'Added env "{app.env}" ({app.address})', highlight=False)
    success(f'project "{name}" updated')
    return 0


@main_with_error_handling()
def project_remove_command(name: str, yes: bool = False, config_file: str | None = None) -> int:
    """Delete a project from every environment, after confirmation."""
    if not name:
        raise MissingNameError()
    if not yes and not confirm(f'Are you sure you want to remove the project "{name}"?'):
        warning("project not removed")
        return 0

    with platform_session(config_file) as (client, environments):
        BulkRemover(client, environments, out=sys.stdout).remove(name)
    return 0


@main_with_error_handling()
def project_info_command(name: str, config_file: str | None = None) -> int:
    """Show the project header and one row per environment."""
    with platform_session(config_file) as (client, environments):
        summary = ProjectSummaryBuilder(client, environments).build(name)

    for line in summary.header_lines():
        print(line)
    print()
    print_table(
        None,
        ["Environment", "Address", "Image", "Git hash/tag", "Deploy date", "Units"],
        [
            [row.env, row.address, row.image_tag, row.git_ref, row.deploy_date, str(row.units)]
            for row in summary.rows
        ],
    )
    return 0


@main_with_error_handling()
def project_env_info_command(name: str, env: str, config_file: str | None = None) -> int:
    """Show the app backing one environment of a project."""
    with platform_session(config_file) as (client, environments):
        app = ProjectSummaryBuilder(client, environments).environment_detail(name, env)
        address = environments.address_for(env, app.cnames)

    print_key_value(
        {
            "App": app.name,
            "Address": address,
            "Platform": app.platform,
            "Plan": app.plan,
            "Pool": app.pool,
            "Team owner": app.team_owner,
            "Teams": ", ".join(app.teams),
            "Owner": app.owner,
            "Repository": app.repository_url,
            "Units": str(app.units),
        },
        title=f'Project "{name}" in env "{env}"',
    )
    return 0


@main_with_error_handling()
def project_list_command(config_file: str | None = None) -> int:
    """List every project with the addresses of its environments."""
    with platform_session(config_file) as (client, environments):
        projects = ProjectSummaryBuilder(client, environments).list_projects()

    if not projects:
        info("no projects found")
        return 0

    print_table(
        None,
        ["Project", "Environments", "Address"],
        [
            [
                project.name,
                "\n".join(env for env, _ in project.envs),
                "\n".join(address for _, address in project.envs),
            ]
            for project in projects
        ],
    )
    return 0
