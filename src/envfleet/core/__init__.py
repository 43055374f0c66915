"""Core modules for envfleet - centralized definitions and utilities."""

from envfleet.core.errors import (
    BulkRemovalError,
    ConfigurationError,
    DuplicateEnvironmentError,
    EnvFleetError,
    ExitCode,
    InvalidEnvironmentError,
    InvalidEnvVarError,
    MissingNameError,
    PartialFailureError,
    ProjectNotFoundError,
    ProviderError,
    ProvisionError,
    UndefinedEnvironmentError,
    ValidationError,
    format_error_message,
    main_with_error_handling,
)

__all__ = [
    "ExitCode",
    "EnvFleetError",
    "ConfigurationError",
    "ValidationError",
    "MissingNameError",
    "InvalidEnvironmentError",
    "DuplicateEnvironmentError",
    "UndefinedEnvironmentError",
    "InvalidEnvVarError",
    "ProjectNotFoundError",
    "ProviderError",
    "ProvisionError",
    "PartialFailureError",
    "BulkRemovalError",
    "main_with_error_handling",
    "format_error_message",
]
