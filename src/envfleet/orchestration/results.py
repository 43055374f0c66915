"""Result types for project orchestration."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class CreatedApp:
    """An app created for one environment of a project."""

    name: str
    env: str
    address: str
    repository_url: str = ""


@dataclass
class ReconcileResult:
    """What a project update changed."""

    project: str
    added: list[CreatedApp] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)


@dataclass
class EnvironmentRow:
    """Per-environment line of a project summary."""

    env: str
    address: str = ""
    image_tag: str = ""
    commit: str = ""
    deployed_at: datetime | None = None
    units: int = 0

    @property
    def git_ref(self) -> str:
        return f"(git) {self.commit}" if self.commit else ""

    @property
    def deploy_date(self) -> str:
        if self.deployed_at is None:
            return ""
        deployed_at = self.deployed_at
        if deployed_at.tzinfo is not None:
            deployed_at = deployed_at.astimezone(timezone.utc)
        return deployed_at.strftime("%a, %d %b %Y %H:%M:%S UTC")


@dataclass
class ProjectSummary:
    """Project-level view assembled from the apps of every environment."""

    name: str
    description: str = ""
    repository: str = ""
    platform: str = ""
    teams: list[str] = field(default_factory=list)
    owner: str = ""
    team_owner: str = ""
    rows: list[EnvironmentRow] = field(default_factory=list)

    def header_lines(self) -> list[str]:
        return [
            f"Project name: {self.name}",
            f"Description: {self.description}",
            f"Repository: {self.repository}",
            f"Platform: {self.platform}",
            f"Teams: {', '.join(self.teams)}",
            f"Owner: {self.owner}",
            f"Team owner: {self.team_owner}",
        ]


@dataclass
class ProjectListing:
    """A project and the addresses of its environments."""

    name: str
    envs: list[tuple[str, str]] = field(default_factory=list)
