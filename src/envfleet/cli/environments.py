"""Environment catalog and target CLI commands: env-list, target-set."""

from __future__ import annotations

from envfleet.cli.ux import print_table, success
from envfleet.config import Config, get_config_path, get_settings, load_config
from envfleet.config.loader import default_config_path
from envfleet.core.errors import ValidationError, main_with_error_handling
from envfleet.environments import EnvironmentSet


@main_with_error_handling()
def env_list_command(config_file: str | None = None) -> int:
    """List the environments of the catalog, in catalog order.

    Returns:
        Exit code (0 for success)
    """
    environments = EnvironmentSet.load(config_file or get_settings().config_file)
    print_table(
        None,
        ["Environment", "DNS Suffix"],
        [[env.name, env.dns_suffix] for env in environments],
    )
    return 0


@main_with_error_handling()
def target_set_command(target: str, config_file: str | None = None) -> int:
    """Store the platform target URL in the config file.

    A config file is created when none exists yet.
    """
    if not target:
        raise ValidationError("please provide the target URL")

    explicit = config_file or get_settings().config_file
    if get_config_path(explicit) is not None:
        config = load_config(explicit)
    else:
        config = Config()
    config.target = target.rstrip("/")
    path = config.save(explicit or config.path or default_config_path())
    success(f"target set to {config.target} ({path})")
    return 0
