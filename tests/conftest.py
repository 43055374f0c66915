"""Root test configuration."""

import io
import logging
import re
from typing import Any

import pytest
import structlog
from envfleet.clients.platform import (
    App,
    DeploymentRecord,
    EnvVar,
    PlatformError,
    ResourceNotFoundError,
)
from envfleet.environments import Environment, EnvironmentSet


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


class FakePlatform:
    """In-memory ResourceClient that records every call.

    ``fail`` maps ``(method, app_name)`` to the exception that call raises.
    """

    def __init__(self) -> None:
        self.apps: dict[str, App] = {}
        self.deploys: dict[str, DeploymentRecord] = {}
        self.env_vars: dict[str, list[EnvVar]] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail: dict[tuple[str, str], Exception] = {}

    def add_app(self, name: str, **fields: Any) -> App:
        app = App(name=name, **fields)
        self.apps[name] = app
        return app

    def _record(self, method: str, name: str) -> None:
        self.calls.append((method, name))
        if (method, name) in self.fail:
            raise self.fail[(method, name)]

    def _existing(self, name: str) -> App:
        if name not in self.apps:
            raise ResourceNotFoundError("App not found.", 404)
        return self.apps[name]

    def mutating_calls(self) -> list[tuple[str, str]]:
        return [call for call in self.calls if call[0] not in ("list_apps", "get_app", "last_deploy", "get_env_vars")]

    def create_app(self, name, *, platform, plan="", team="", pool="", description=""):
        self._record("create_app", name)
        self.add_app(
            name,
            platform=platform,
            plan=plan,
            team_owner=team,
            pool=pool,
            description=description,
            repository_url=f"git@git.example.com:{name}.git",
        )
        return {"status": "success", "repository_url": f"git@git.example.com:{name}.git"}

    def delete_app(self, name):
        self._record("delete_app", name)
        self._existing(name)
        del self.apps[name]

    def add_cname(self, name, cname):
        self._record("add_cname", name)
        self._existing(name).cnames.append(cname)

    def get_app(self, name):
        self._record("get_app", name)
        return self._existing(name)

    def list_apps(self, name_pattern=None):
        self._record("list_apps", name_pattern or "")
        return [app for name, app in self.apps.items() if not name_pattern or re.search(name_pattern, name)]

    def update_app(self, name, *, description=None, team=None, plan=None):
        self._record("update_app", name)
        app = self._existing(name)
        if description is not None:
            app.description = description
        if team is not None:
            app.team_owner = team
        if plan is not None:
            app.plan = plan

    def last_deploy(self, name):
        self._record("last_deploy", name)
        return self.deploys.get(name)

    def set_env_vars(self, name, envs, *, private=False, no_restart=False):
        self._record("set_env_vars", name)
        current = self.env_vars.setdefault(name, [])
        for env_name, value in envs.items():
            current.append(EnvVar(name=env_name, value=value, public=not private))

    def unset_env_vars(self, name, names, *, no_restart=False):
        self._record("unset_env_vars", name)
        self.env_vars[name] = [var for var in self.env_vars.get(name, []) if var.name not in names]

    def get_env_vars(self, name):
        self._record("get_env_vars", name)
        return list(self.env_vars.get(name, []))


@pytest.fixture
def platform():
    """Empty in-memory platform."""
    return FakePlatform()


@pytest.fixture
def environments():
    """Catalog with dev, qa, stage and prod."""
    return EnvironmentSet(
        [
            Environment(name="dev", dns_suffix="dev.example.com"),
            Environment(name="qa", dns_suffix="qa.example.com"),
            Environment(name="stage", dns_suffix="stage.example.com"),
            Environment(name="prod", dns_suffix="example.com"),
        ]
    )


@pytest.fixture
def out():
    """Text sink for progress lines."""
    return io.StringIO()


@pytest.fixture
def platform_error():
    """Factory for a 500 response error."""

    def make(message: str = "something went wrong") -> PlatformError:
        return PlatformError(f"{message} (HTTP 500)", 500)

    return make
