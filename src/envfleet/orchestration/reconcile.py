"""
Project reconciliation.

Adds environments to a project, removes others and updates the metadata of
the apps that remain. Additions are all or nothing; removals and updates run
independently per environment and their failures are reported together.
"""

from __future__ import annotations

import sys
from typing import Sequence, TextIO


from envfleet.clients.platform import App, PlatformError, ResourceClient
from envfleet.core.errors import (
    DuplicateEnvironmentError,
    MissingNameError,
    PartialFailureError,
    ProviderError,
    UndefinedEnvironmentError,
)
from envfleet.environments import EnvironmentSet
from envfleet.logging import bind_context
from envfleet.orchestration.discovery import discover_project
from envfleet.orchestration.fanout import run_per_environment
from envfleet.orchestration.provision import ProvisionOrchestrator
from envfleet.orchestration.results import CreatedApp, ReconcileResult



class ReconcileOrchestrator:
    """Brings a project's environment set and metadata to the requested state."""

    def __init__(
        self,
        client: ResourceClient,
        environments: EnvironmentSet,
        out: TextIO | None = None,
    ) -> None:
        self.client = client
        self.environments = environments
        self.out = out or sys.stdout

    def reconcile(
        self,
        project: str,
        *,
        add: Sequence[str] = (),
        remove: Sequence[str] = (),
        description: str | None = None,
        team: str | None = None,
        plan: str | None = None,
    ) -> ReconcileResult:
        """
        Update ``project``.

        Every validation runs before the first mutating call; name and
        catalog checks run before any remote call at all.

        Raises:
            MissingNameError: empty project name
            InvalidEnvironmentError: add/remove names outside the catalog;
                checked before discovery, so an unknown removal is reported
                here rather than as UndefinedEnvironmentError
            ProjectNotFoundError: no app belongs to the project
            DuplicateEnvironmentError: adding an environment already present
            UndefinedEnvironmentError: removing an environment not present
            ProvisionError: creating the added environments failed
            PartialFailureError: some removals or updates failed
        """
        if not project:
            raise MissingNameError()
        self.environments.validate([*add, *remove])

        members = discover_project(self.client, self.environments, project)
        current = [env for env, _ in members]
        for env in add:
            if env in current:
                raise DuplicateEnvironmentError(env)
        for env in remove:
            if env not in current:
                raise UndefinedEnvironmentError(env)

        log = bind_context(project=project)
        result = ReconcileResult(project=project)

        if add:
            result.added = self._add_environments(
                project, members[0][1], add, description=description, team=team, plan=plan
            )
            log.info("environments_added", envs=[a.env for a in result.added])

        failures: dict[str, Exception] = {}
        if remove:
            removal_failures = run_per_environment(
                self.environments.ordered(remove),
                lambda env: self.client.delete_app(self.environments.app_name(project, env)),
                label=lambda env: f'Deleting from env "{env}"',
                out=self.out,
                event="app_deleted",
            )
            result.removed = [env for env in self.environments.ordered(remove) if env not in removal_failures]
            failures.update(removal_failures)

        if description is not None or team is not None or plan is not None:
            surviving = self.environments.ordered(
                [env for env in current if env not in remove] + [a.env for a in result.added]
            )
            update_failures = run_per_environment(
                surviving,
                lambda env: self.client.update_app(
                    self.environments.app_name(project, env),
                    description=description,
                    team=team,
                    plan=plan,
                ),
                label=lambda env: f'Updating env "{env}"',
                out=self.out,
                event="app_updated",
            )
            result.updated = [env for env in surviving if env not in update_failures]
            failures.update(update_failures)

        if failures:
            log.info("project_update_incomplete", failed_envs=list(failures))
            raise PartialFailureError.from_failures(f'update project "{project}"', failures)
        return result

    def _add_environments(
        self,
        project: str,
        reference: App,
        envs: Sequence[str],
        *,
        description: str | None,
        team: str | None,
        plan: str | None,
    ) -> list[CreatedApp]:
        # The listing does not always carry the full app, fetch the detail.
        try:
            detail = self.client.get_app(reference.name)
        except PlatformError as exc:
            raise ProviderError(f'failed to load app "{reference.name}": {exc}') from exc

        return ProvisionOrchestrator(self.client, self.environments).provision(
            project,
            platform=detail.platform,
            envs=envs,
            team=team if team is not None else detail.team_owner,
            plan=plan if plan is not None else detail.plan,
            description=description if description is not None else detail.description,
        )
