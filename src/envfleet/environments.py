"""
Environment catalog.

An environment is a named deployment target (dev, qa, stage, prod...) with a
DNS suffix. A project is realised as one app per environment, named
``{project}-{env}`` and addressed as ``{project}.{dns_suffix}``. Every
relation between app names and environments goes through this module.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence

from envfleet.config.loader import Config, load_config
from envfleet.core.errors import InvalidEnvironmentError


@dataclass(frozen=True)
class Environment:
    """A deployment environment from the catalog."""

    name: str
    dns_suffix: str
    name_pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)
    address_pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name_pattern", re.compile(f"^(.+)-{re.escape(self.name)}$"))
        object.__setattr__(
            self, "address_pattern", re.compile(rf"^([^.]+)\.{re.escape(self.dns_suffix)}$")
        )

    @property
    def pool_name(self) -> str:
        return f"{self.name}\\{self.dns_suffix}"

    def app_name(self, project: str) -> str:
        return f"{project}-{self.name}"

    def address(self, project: str) -> str:
        return f"{project}.{self.dns_suffix}"

    def project_of(self, app_name: str) -> str | None:
        """Project name for an app of this environment, or None."""
        match = self.name_pattern.match(app_name)
        return match.group(1) if match else None

    def address_for(self, cnames: Iterable[str]) -> str:
        """First cname that belongs to this environment's DNS suffix."""
        for cname in cnames:
            if self.address_pattern.match(cname):
                return cname
        return ""


class EnvironmentSet:
    """Ordered, read-only catalog of environments."""

    def __init__(self, environments: Iterable[Environment]) -> None:
        self._envs: tuple[Environment, ...] = tuple(environments)
        self._by_name = {env.name: env for env in self._envs}

    @classmethod
    def from_config(cls, config: Config) -> "EnvironmentSet":
        return cls(Environment(name=e.name, dns_suffix=e.dns_suffix) for e in config.envs)

    @classmethod
    def load(cls, config_file: str | None = None) -> "EnvironmentSet":
        """Load the catalog from the config file (raises ConfigurationError)."""
        return cls.from_config(load_config(config_file))

    def __iter__(self) -> Iterator[Environment]:
        return iter(self._envs)

    def __len__(self) -> int:
        return len(self._envs)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def names(self) -> list[str]:
        """Environment names in catalog order."""
        return [env.name for env in self._envs]

    def contains(self, name: str) -> bool:
        return name in self._by_name

    def get(self, name: str) -> Environment:
        return self._by_name[name]

    def pool_name(self, env: str) -> str:
        return self._by_name[env].pool_name

    def address(self, project: str, env: str) -> str:
        return self._by_name[env].address(project)

    def app_name(self, project: str, env: str) -> str:
        return self._by_name[env].app_name(project)

    def address_for(self, env: str, cnames: Iterable[str]) -> str:
        return self._by_name[env].address_for(cnames)

    def validate(self, names: Iterable[str]) -> None:
        """Raise InvalidEnvironmentError listing every unknown name."""
        invalid = [name for name in names if name not in self._by_name]
        if invalid:
            raise InvalidEnvironmentError(invalid, self.names())

    def select(self, names: Sequence[str]) -> list[Environment]:
        """Environments for the given names, in the order given."""
        self.validate(names)
        return [self._by_name[name] for name in names]

    def ordered(self, names: Iterable[str]) -> list[str]:
        """The given names sorted by catalog order."""
        wanted = set(names)
        return [env.name for env in self._envs if env.name in wanted]

    def environment_for_app(self, app_name: str) -> tuple[str, Environment] | None:
        """(project, environment) for an app name, or None if it matches no env."""
        for env in self._envs:
            project = env.project_of(app_name)
            if project:
                return project, env
        return None

    def project_environments(self, project: str, app_names: Iterable[str]) -> list[str]:
        """Environments of ``project`` among ``app_names``, in discovery order.

        An app belongs to the project when its name is ``{project}-{env}`` and
        ``env`` is in the catalog.
        """
        pattern = re.compile(f"^{re.escape(project)}-(.+)$")
        found: list[str] = []
        for app_name in app_names:
            match = pattern.match(app_name)
            if match and match.group(1) in self._by_name and match.group(1) not in found:
                found.append(match.group(1))
        return found
