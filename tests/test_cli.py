"""Tests for the CLI commands and argument parsing.

Commands run against a config file in a temp directory and a mocked
platform API.
"""

from unittest.mock import patch

import pytest
import respx
import yaml
from httpx import Response
from envfleet.cli.environments import env_list_command, target_set_command
from envfleet.cli.envvars import envvar_get_command, envvar_set_command
from envfleet.cli.main import build_parser, main
from envfleet.cli.project import (
    project_create_command,
    project_info_command,
    project_list_command,
    project_remove_command,
)
from envfleet.config.settings import Settings
from envfleet.core.errors import ExitCode

API = "https://platform.example.com/1.0"


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.dump(
            {
                "target": "https://platform.example.com",
                "registry": "registry.example.com",
                "envs": [
                    {"name": "dev", "dnsSuffix": "dev.example.com"},
                    {"name": "prod", "dnsSuffix": "example.com"},
                ],
            }
        )
    )
    return str(path)


@pytest.fixture(autouse=True)
def settings():
    """Settings isolated from the process environment."""
    isolated = Settings(_env_file=None, target=None, token="t0k3n", config_file=None)
    with patch("envfleet.cli.session.get_settings", return_value=isolated), patch(
        "envfleet.cli.environments.get_settings", return_value=isolated
    ):
        yield isolated


class TestParser:
    """Tests for build_parser."""

    def test_project_create(self):
        args = build_parser().parse_args(
            ["project-create", "-n", "proj1", "-l", "python", "-t", "admin", "-p", "medium", "-e", "dev, prod"]
        )

        assert args.command == "project-create"
        assert (args.name, args.platform, args.team, args.plan) == ("proj1", "python", "admin", "medium")
        assert args.envs == ["dev", "prod"]

    def test_project_update_defaults(self):
        args = build_parser().parse_args(["project-update", "-n", "proj1", "-a", "qa"])

        assert args.add_envs == ["qa"]
        assert args.remove_envs == []
        assert args.description is None

    def test_envvar_set(self):
        args = build_parser().parse_args(["envvar-set", "-n", "proj1", "--private", "A=1", "B=2"])

        assert args.assignments == ["A=1", "B=2"]
        assert args.private is True
        assert args.envs is None


class TestProjectCommands:
    """Tests for the project-* commands."""

    @respx.mock
    def test_create(self, config_file, capsys):
        create = respx.post(f"{API}/apps").mock(
            return_value=Response(201, json={"repository_url": "git@git.example.com:proj1-dev.git"})
        )
        respx.post(f"{API}/apps/proj1-dev/cname").mock(return_value=Response(200))
        respx.post(f"{API}/apps/proj1-prod/cname").mock(return_value=Response(200))

        code = project_create_command("proj1", "python", config_file=config_file)

        assert code == 0
        assert create.call_count == 2
        assert create.calls.last.request.headers["Authorization"] == "bearer t0k3n"
        assert capsys.readouterr().out == (
            'successfully created the project "proj1"!\nGit repository: git@git.example.com:proj1-dev.git\n'
        )

    @respx.mock
    def test_create_rolls_back(self, config_file, capsys):
        respx.post(f"{API}/apps").mock(return_value=Response(201, json={}))
        respx.post(f"{API}/apps/proj1-dev/cname").mock(return_value=Response(200))
        respx.post(f"{API}/apps/proj1-prod/cname").mock(return_value=Response(500, text="cname taken"))
        delete_dev = respx.delete(f"{API}/apps/proj1-dev").mock(return_value=Response(200))
        delete_prod = respx.delete(f"{API}/apps/proj1-prod").mock(return_value=Response(200))

        code = project_create_command("proj1", "python", config_file=config_file)

        assert code == ExitCode.PROVIDER_ERROR
        assert delete_dev.called and delete_prod.called
        assert 'failed to configure project "proj1"' in capsys.readouterr().err

    def test_create_invalid_env_makes_no_request(self, config_file, capsys):
        with respx.mock(assert_all_called=False) as router:
            code = project_create_command("proj1", "python", envs=["qa"], config_file=config_file)

            assert router.calls.call_count == 0
        assert code == ExitCode.VALIDATION_ERROR
        assert "invalid values: qa (valid options are: dev, prod)" in capsys.readouterr().err

    def test_missing_config(self, tmp_path, capsys):
        code = project_create_command("proj1", "python", config_file=str(tmp_path / "none.yaml"))

        assert code == ExitCode.CONFIG_ERROR
        assert "unable to load environments file" in capsys.readouterr().err

    @respx.mock
    def test_remove_reports_each_environment(self, config_file, capsys):
        respx.delete(f"{API}/apps/proj1-dev").mock(return_value=Response(404, text="App not found."))
        respx.delete(f"{API}/apps/proj1-prod").mock(return_value=Response(200))

        code = project_remove_command("proj1", yes=True, config_file=config_file)

        captured = capsys.readouterr()
        assert code == ExitCode.PARTIAL_FAILURE
        assert captured.out == 'Deleting from env "dev"... failed\nDeleting from env "prod"... ok\n'
        assert 'failed to remove project "proj1" from envs: dev' in captured.err

    def test_remove_not_confirmed(self, config_file):
        with patch("envfleet.cli.project.confirm", return_value=False) as mock_confirm:
            with respx.mock(assert_all_called=False) as router:
                code = project_remove_command("proj1", config_file=config_file)
                assert router.calls.call_count == 0

        assert code == 0
        mock_confirm.assert_called_once()

    @respx.mock
    def test_info(self, config_file, capsys):
        respx.get(f"{API}/apps").mock(return_value=Response(200, json=[{"name": "proj1-dev"}]))
        respx.get(f"{API}/apps/proj1-dev").mock(
            return_value=Response(
                200,
                json={"name": "proj1-dev", "platform": "python", "teams": ["admin"], "cname": ["proj1.dev.example.com"]},
            )
        )
        respx.get(f"{API}/deploys").mock(return_value=Response(204))

        code = project_info_command("proj1", config_file=config_file)

        out = capsys.readouterr().out
        assert code == 0
        assert out.startswith("Project name: proj1\nDescription: \n")
        assert "Platform: python\nTeams: admin\n" in out
        assert "Team owner: \n" in out

    @respx.mock
    def test_info_project_not_found(self, config_file, capsys):
        respx.get(f"{API}/apps").mock(return_value=Response(204))

        assert project_info_command("proj1", config_file=config_file) == ExitCode.NOT_FOUND
        assert "project not found" in capsys.readouterr().err

    @respx.mock
    def test_list(self, config_file, capsys):
        respx.get(f"{API}/apps").mock(
            return_value=Response(200, json=[{"name": "proj1-dev", "cname": ["proj1.dev.example.com"]}])
        )

        assert project_list_command(config_file=config_file) == 0
        out = capsys.readouterr().out
        assert "proj1" in out
        assert "Environments" in out

    def test_target_from_settings(self, config_file, settings):
        settings.target = "https://other.example.com"

        with respx.mock:
            route = respx.get("https://other.example.com/1.0/apps").mock(return_value=Response(204))
            project_list_command(config_file=config_file)

        assert route.called


class TestEnvVarCommands:
    """Tests for the envvar-* commands."""

    def test_set_invalid_assignment(self, config_file, capsys):
        code = envvar_set_command("proj1", ["USER_NAME"], config_file=config_file)

        assert code == ExitCode.VALIDATION_ERROR
        assert "configuration vars must be specified in the form NAME=value" in capsys.readouterr().err

    @respx.mock
    def test_set_partial_failure(self, config_file, capsys):
        respx.post(f"{API}/apps/proj1-dev/env").mock(return_value=Response(200))
        respx.post(f"{API}/apps/proj1-prod/env").mock(return_value=Response(500, text="something went wrong"))

        code = envvar_set_command("proj1", ["A=1"], config_file=config_file)

        assert code == ExitCode.PARTIAL_FAILURE
        assert capsys.readouterr().out == (
            'setting variables in environment "dev"... ok\n'
            'setting variables in environment "prod"... failed\n'
        )

    def test_get_missing_name(self, config_file, capsys):
        assert envvar_get_command("", config_file=config_file) == ExitCode.VALIDATION_ERROR
        assert "please provide the name of the project" in capsys.readouterr().err


class TestEnvironmentCommands:
    """Tests for env-list and target-set."""

    def test_env_list(self, config_file, capsys):
        assert env_list_command(config_file=config_file) == 0
        out = capsys.readouterr().out
        assert "dev.example.com" in out
        assert "prod" in out

    def test_target_set_updates_file(self, config_file):
        assert target_set_command("https://new.example.com/", config_file=config_file) == 0

        with open(config_file) as f:
            data = yaml.safe_load(f)
        assert data["target"] == "https://new.example.com"
        assert [env["name"] for env in data["envs"]] == ["dev", "prod"]

    def test_target_set_creates_file(self, tmp_path):
        path = tmp_path / "fresh" / "config.yaml"

        assert target_set_command("https://new.example.com", config_file=str(path)) == 0
        assert yaml.safe_load(path.read_text())["target"] == "https://new.example.com"


def test_main_dispatches(config_file):
    with patch("envfleet.cli.main.configure_logging"):
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", config_file, "env-list"])

    assert exc_info.value.code == 0
