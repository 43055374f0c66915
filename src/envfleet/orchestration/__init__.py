"""Multi-environment project orchestration."""

from envfleet.orchestration.envvars import EnvVarManager, parse_env_assignments
from envfleet.orchestration.provision import ProvisionOrchestrator, rollback
from envfleet.orchestration.reconcile import ReconcileOrchestrator
from envfleet.orchestration.removal import BulkRemover
from envfleet.orchestration.results import (
    CreatedApp,
    EnvironmentRow,
    ProjectListing,
    ProjectSummary,
    ReconcileResult,
)
from envfleet.orchestration.summary import ProjectSummaryBuilder

__all__ = [
    "BulkRemover",
    "CreatedApp",
    "EnvVarManager",
    "EnvironmentRow",
    "ProjectListing",
    "ProjectSummary",
    "ProjectSummaryBuilder",
    "ProvisionOrchestrator",
    "ReconcileOrchestrator",
    "ReconcileResult",
    "parse_env_assignments",
    "rollback",
]
