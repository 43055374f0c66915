"""
CLI commands for envfleet.
"""

from envfleet.cli.environments import env_list_command, target_set_command
from envfleet.cli.envvars import envvar_get_command, envvar_set_command, envvar_unset_command
from envfleet.cli.project import (
    project_create_command,
    project_env_info_command,
    project_info_command,
    project_list_command,
    project_remove_command,
    project_update_command,
)

__all__ = [
    "env_list_command",
    "envvar_get_command",
    "envvar_set_command",
    "envvar_unset_command",
    "project_create_command",
    "project_env_info_command",
    "project_info_command",
    "project_list_command",
    "project_remove_command",
    "project_update_command",
    "target_set_command",
]
