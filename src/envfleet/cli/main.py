"""envfleet command line entry point."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from envfleet import __version__
from envfleet.config import get_settings
from envfleet.logging import configure_logging


def _comma_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _add_name(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-n", "--name", default="", help="name of the project")


def _add_envs(parser: argparse.ArgumentParser, help_text: str) -> None:
    parser.add_argument("-e", "--envs", type=_comma_list, default=None, help=help_text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="envfleet", description="Manage projects spread across deployment environments"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", dest="config_file", help="Path to the environments config file")
    parser.add_argument("--log-level", help="Log level (default: ENVFLEET_LOG_LEVEL or WARNING)")
    subparsers = parser.add_subparsers(dest="command")

    # Environment catalog
    subparsers.add_parser("env-list", help="List the available environments")

    target_parser = subparsers.add_parser("target-set", help="Store the platform target URL")
    target_parser.add_argument("target", help="Platform API URL")

    # Project lifecycle
    create_parser = subparsers.add_parser("project-create", help="Create a project in several environments")
    _add_name(create_parser)
    create_parser.add_argument("-l", "--platform", default="", help="platform of the project")
    create_parser.add_argument("-t", "--team", default="", help="team that owns the project")
    create_parser.add_argument("-p", "--plan", default="", help="plan to use for the project")
    create_parser.add_argument("-d", "--description", default="", help="description of the project")
    _add_envs(create_parser, "comma-separated list of environments to use (defaults to all)")

    update_parser = subparsers.add_parser("project-update", help="Update a project and its environments")
    _add_name(update_parser)
    update_parser.add_argument("-t", "--team", help="new team owner")
    update_parser.add_argument("-p", "--plan", help="new plan")
    update_parser.add_argument("-d", "--description", help="new description")
    update_parser.add_argument(
        "-a", "--add-envs", type=_comma_list, default=[], help="comma-separated environments to add"
    )
    update_parser.add_argument(
        "-r", "--remove-envs", type=_comma_list, default=[], help="comma-separated environments to remove"
    )

    remove_parser = subparsers.add_parser("project-remove", help="Remove a project from every environment")
    _add_name(remove_parser)
    remove_parser.add_argument("-y", "--yes", action="store_true", help="don't ask for confirmation")

    info_parser = subparsers.add_parser("project-info", help="Show a project and its environments")
    _add_name(info_parser)

    env_info_parser = subparsers.add_parser("project-env-info", help="Show one environment of a project")
    _add_name(env_info_parser)
    env_info_parser.add_argument("env", help="environment name")

    subparsers.add_parser("project-list", help="List all projects")

    # Environment variables
    set_parser = subparsers.add_parser("envvar-set", help="Set environment variables")
    _add_name(set_parser)
    _add_envs(set_parser, "comma-separated list of environments (defaults to all)")
    set_parser.add_argument("--private", "-p", action="store_true", help="mark the variables as private")
    set_parser.add_argument("--no-restart", action="store_true", help="don't restart the apps")
    set_parser.add_argument("assignments", nargs="+", metavar="NAME=value")

    unset_parser = subparsers.add_parser("envvar-unset", help="Unset environment variables")
    _add_name(unset_parser)
    _add_envs(unset_parser, "comma-separated list of environments (defaults to all)")
    unset_parser.add_argument("--no-restart", action="store_true", help="don't restart the apps")
    unset_parser.add_argument("variables", nargs="+", metavar="NAME")

    get_parser = subparsers.add_parser("envvar-get", help="Show environment variables")
    _add_name(get_parser)
    _add_envs(get_parser, "comma-separated list of environments (defaults to all)")

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level, json_logs=settings.log_json)
    config_file = args.config_file

    if args.command == "env-list":
        from envfleet.cli.environments import env_list_command

        sys.exit(env_list_command(config_file=config_file))

    if args.command == "target-set":
        from envfleet.cli.environments import target_set_command

        sys.exit(target_set_command(args.target, config_file=config_file))

    if args.command == "project-create":
        from envfleet.cli.project import project_create_command

        sys.exit(
            project_create_command(
                args.name,
                args.platform,
                envs=args.envs,
                team=args.team,
                plan=args.plan,
                description=args.description,
                config_file=config_file,
            )
        )

    if args.command == "project-update":
        from envfleet.cli.project import project_update_command

        sys.exit(
            project_update_command(
                args.name,
                add_envs=args.add_envs,
                remove_envs=args.remove_envs,
                description=args.description,
                team=args.team,
                plan=args.plan,
                config_file=config_file,
            )
        )

    if args.command == "project-remove":
        from envfleet.cli.project import project_remove_command

        sys.exit(project_remove_command(args.name, yes=args.yes, config_file=config_file))

    if args.command == "project-info":
        from envfleet.cli.project import project_info_command

        sys.exit(project_info_command(args.name, config_file=config_file))

    if args.command == "project-env-info":
        from envfleet.cli.project import project_env_info_command

        sys.exit(project_env_info_command(args.name, args.env, config_file=config_file))

    if args.command == "project-list":
        from envfleet.cli.project import project_list_command

        sys.exit(project_list_command(config_file=config_file))

    if args.command == "envvar-set":
        from envfleet.cli.envvars import envvar_set_command

        sys.exit(
            envvar_set_command(
                args.name,
                args.assignments,
                envs=args.envs,
                private=args.private,
                no_restart=args.no_restart,
                config_file=config_file,
            )
        )

    if args.command == "envvar-unset":
        from envfleet.cli.envvars import envvar_unset_command

        sys.exit(
            envvar_unset_command(
                args.name,
                args.variables,
                envs=args.envs,
                no_restart=args.no_restart,
                config_file=config_file,
            )
        )

    if args.command == "envvar-get":
        from envfleet.cli.envvars import envvar_get_command

        sys.exit(envvar_get_command(args.name, envs=args.envs, config_file=config_file))

    parser.print_help()


if __name__ == "__main__":
    main()
