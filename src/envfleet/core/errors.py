"""
Unified error handling for envfleet commands.

This module provides the error taxonomy shared by the orchestrators and the
CLI, plus the decorator that turns those errors into exit codes.

Exit Codes:
- 0: Success
- 1: Partial failure (some per-environment operations failed)
- 4: Project not found
- 10: Configuration error
- 11: Provider error (remote platform failure)
- 12: Validation error
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, Sequence, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    PARTIAL_FAILURE = 1
    NOT_FOUND = 4
    CONFIG_ERROR = 10
    PROVIDER_ERROR = 11
    VALIDATION_ERROR = 12
    UNKNOWN_ERROR = 127


class EnvFleetError(Exception):
    """Base exception for envfleet errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(EnvFleetError):
    """Raised when the local configuration is missing or corrupt."""

    exit_code = ExitCode.CONFIG_ERROR


class ValidationError(EnvFleetError):
    """Raised for input validation failures, before any remote call."""

    exit_code = ExitCode.VALIDATION_ERROR


class MissingNameError(ValidationError):
    """Raised when a required name is not provided."""

    def __init__(self, message: str = "please provide the name of the project"):
        super().__init__(message)


class InvalidEnvironmentError(ValidationError):
    """Raised when requested environments are not part of the catalog."""

    def __init__(self, invalid: Sequence[str], valid: Sequence[str]):
        super().__init__(
            f"invalid values: {', '.join(invalid)} (valid options are: {', '.join(valid)})",
            details={"invalid": list(invalid)},
        )
        self.invalid = list(invalid)
        self.valid = list(valid)


class DuplicateEnvironmentError(ValidationError):
    """Raised when adding an environment that the project already has."""

    def __init__(self, env: str):
        super().__init__(f'env "{env}" is already defined in this project')
        self.env = env


class UndefinedEnvironmentError(ValidationError):
    """Raised when removing an environment that the project does not have."""

    def __init__(self, env: str):
        super().__init__(f'env "{env}" is not defined in this project')
        self.env = env


class InvalidEnvVarError(ValidationError):
    """Raised for malformed environment variable arguments."""

    def __init__(self, message: str = "configuration vars must be specified in the form NAME=value"):
        super().__init__(message)


class ProjectNotFoundError(EnvFleetError):
    """Raised when no app on the platform belongs to the project."""

    exit_code = ExitCode.NOT_FOUND

    def __init__(self, project: str | None = None):
        details = {"project": project} if project else None
        super().__init__("project not found", details=details)


class ProviderError(EnvFleetError):
    """Raised when the remote platform fails."""

    exit_code = ExitCode.PROVIDER_ERROR


class ProvisionError(ProviderError):
    """Raised when creating or addressing an app fails mid-batch.

    Always raised after the best-effort rollback of the apps created in the
    same batch.
    """

    def __init__(self, message: str, *, env: str | None = None, cause: Exception | None = None):
        super().__init__(message, details={"env": env} if env else None)
        self.env = env
        self.cause = cause


class PartialFailureError(EnvFleetError):
    """Raised when some independent per-environment operations failed."""

    exit_code = ExitCode.PARTIAL_FAILURE

    def __init__(self, message: str, failures: dict[str, Exception]):
        super().__init__(message, details={"failed_envs": ", ".join(failures)})
        self.failures = failures

    @classmethod
    def from_failures(cls, action: str, failures: dict[str, Exception]) -> "PartialFailureError":
        causes = "; ".join(f'env "{env}": {exc}' for env, exc in failures.items())
        return cls(f"failed to {action}: {causes}", failures)


class BulkRemovalError(PartialFailureError):
    """Raised when deleting a project failed in at least one environment."""

    def __init__(self, project: str, failures: dict[str, Exception]):
        super().__init__(
            f'failed to remove project "{project}" from envs: {", ".join(failures)}',
            failures,
        )
        self.project = project


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI command functions that provides unified error handling.

    Catches exceptions, reports them to the user and converts them to
    appropriate exit codes.

    Args:
        show_traceback: If True, show full traceback for unexpected errors
        log_errors: If True, log errors to structlog

    Exit codes:
        - EnvFleetError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            from envfleet.cli.ux import error as print_error

            try:
                return func(*args, **kwargs)
            except EnvFleetError as e:
                if log_errors:
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=e.exit_code,
                        **e.details,
                    )
                print_error(e.message)
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130  # Standard exit code for SIGINT
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=ExitCode.UNKNOWN_ERROR,
                    )
                print_error(f"Unexpected error: {e}")
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: EnvFleetError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg
