"""
Platform API client.

Talks to the PaaS HTTP API that hosts the per-environment apps. Every call
is attempted exactly once; failures are raised as PlatformError (or
ResourceNotFoundError for 404 responses) so orchestrators can decide what a
failure means for the batch they are running.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Protocol

import httpx
import structlog

logger = structlog.get_logger()


class PlatformError(Exception):
    """Raised when the platform API call fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ResourceNotFoundError(PlatformError):
    """Raised when the requested app does not exist."""


@dataclass
class App:
    """One environment's app as reported by the platform."""

    name: str
    description: str = ""
    platform: str = ""
    plan: str = ""
    team_owner: str = ""
    owner: str = ""
    repository_url: str = ""
    teams: list[str] = field(default_factory=list)
    cnames: list[str] = field(default_factory=list)
    units: int = 0
    pool: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "App":
        plan = data.get("plan") or ""
        if isinstance(plan, dict):
            plan = plan.get("name", "")
        return cls(
            name=data.get("name", ""),
            description=data.get("description") or "",
            platform=data.get("platform") or "",
            plan=plan,
            team_owner=data.get("teamowner") or "",
            owner=data.get("owner") or "",
            repository_url=data.get("repository") or data.get("repository_url") or "",
            teams=list(data.get("teams") or []),
            cnames=list(data.get("cname") or []),
            units=len(data.get("units") or []),
            pool=data.get("pool") or "",
        )


@dataclass
class DeploymentRecord:
    """The most recent deploy of an app."""

    id: str
    commit: str = ""
    image: str = ""
    timestamp: datetime | None = None

    @property
    def image_tag(self) -> str:
        return self.image.rsplit(":", 1)[-1] if ":" in self.image else self.image

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeploymentRecord":
        raw_ts = data.get("Timestamp") or data.get("timestamp")
        timestamp = None
        if raw_ts:
            timestamp = datetime.fromisoformat(raw_ts.replace("Z", "+00:00"))
        return cls(
            id=data.get("ID") or data.get("id") or "",
            commit=data.get("Commit") or data.get("commit") or "",
            image=data.get("Image") or data.get("image") or "",
            timestamp=timestamp,
        )


@dataclass
class EnvVar:
    """An environment variable of an app."""

    name: str
    value: str
    public: bool = True


class ResourceClient(Protocol):
    """Capabilities the orchestrators need from the platform."""

    def create_app(
        self,
        name: str,
        *,
        platform: str,
        plan: str = "",
        team: str = "",
        pool: str = "",
        description: str = "",
    ) -> dict[str, Any]: ...

    def delete_app(self, name: str) -> None: ...

    def add_cname(self, name: str, cname: str) -> None: ...

    def get_app(self, name: str) -> App: ...

    def list_apps(self, name_pattern: str | None = None) -> list[App]: ...

    def update_app(
        self,
        name: str,
        *,
        description: str | None = None,
        team: str | None = None,
        plan: str | None = None,
    ) -> None: ...

    def last_deploy(self, name: str) -> DeploymentRecord | None: ...

    def set_env_vars(
        self,
        name: str,
        envs: dict[str, str],
        *,
        private: bool = False,
        no_restart: bool = False,
    ) -> None: ...

    def unset_env_vars(self, name: str, names: Iterable[str], *, no_restart: bool = False) -> None: ...

    def get_env_vars(self, name: str) -> list[EnvVar]: ...


class PlatformClient:
    """
    HTTP client for the platform API.

    Implements ResourceClient. Requests are form-encoded, responses JSON.
    """

    def __init__(
        self,
        target: str,
        token: str | None = None,
        *,
        api_version: str = "1.0",
        timeout: float = 30.0,
    ):
        """
        Initialize the platform client.

        Args:
            target: Platform API base URL
            token: API token, sent as a bearer token
            api_version: API version prefix
            timeout: Request timeout in seconds
        """
        self.target = target.rstrip("/")
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"bearer {token}"
        self.client = httpx.Client(
            base_url=f"{self.target}/{api_version}",
            headers=headers,
            timeout=timeout,
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self.client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            detail = exc.response.text.strip() or exc.response.reason_phrase
            logger.debug("platform_http_error", method=method, path=path, status=status)
            if status == 404:
                raise ResourceNotFoundError(detail or "not found", status) from exc
            raise PlatformError(f"{detail} (HTTP {status})", status) from exc
        except httpx.HTTPError as exc:
            logger.debug("platform_network_error", method=method, path=path, error=str(exc))
            raise PlatformError(str(exc)) from exc
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise PlatformError(f"invalid response from platform: {exc}") from exc

    def create_app(
        self,
        name: str,
        *,
        platform: str,
        plan: str = "",
        team: str = "",
        pool: str = "",
        description: str = "",
    ) -> dict[str, Any]:
        """Create an app and return the platform's creation payload."""
        form = {
            "name": name,
            "description": description,
            "platform": platform,
            "plan": plan,
            "teamOwner": team,
            "pool": pool,
        }
        response = self._request("POST", "/apps", data=form)
        payload = self._json(response) or {}
        if not isinstance(payload, dict):
            raise PlatformError(f"invalid response from platform: expected an object, got {type(payload).__name__}")
        return payload

    def delete_app(self, name: str) -> None:
        self._request("DELETE", f"/apps/{name}")

    def add_cname(self, name: str, cname: str) -> None:
        self._request("POST", f"/apps/{name}/cname", data={"cname": cname})

    def get_app(self, name: str) -> App:
        response = self._request("GET", f"/apps/{name}")
        data = self._json(response)
        if not data:
            raise ResourceNotFoundError("app not found", response.status_code)
        return App.from_dict(data)

    def list_apps(self, name_pattern: str | None = None) -> list[App]:
        """List apps, optionally filtered by a name regular expression."""
        params = {"name": name_pattern} if name_pattern else None
        response = self._request("GET", "/apps", params=params)
        return [App.from_dict(item) for item in self._json(response) or []]

    def update_app(
        self,
        name: str,
        *,
        description: str | None = None,
        team: str | None = None,
        plan: str | None = None,
    ) -> None:
        form = {}
        if description is not None:
            form["description"] = description
        if team is not None:
            form["teamOwner"] = team
        if plan is not None:
            form["plan"] = plan
        self._request("PUT", f"/apps/{name}", data=form)

    def last_deploy(self, name: str) -> DeploymentRecord | None:
        response = self._request("GET", "/deploys", params={"limit": 1, "app": name})
        deploys = self._json(response) or []
        if not deploys:
            return None
        try:
            return DeploymentRecord.from_dict(deploys[0])
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise PlatformError(f"invalid response from platform: {exc}") from exc

    def set_env_vars(
        self,
        name: str,
        envs: dict[str, str],
        *,
        private: bool = False,
        no_restart: bool = False,
    ) -> None:
        form: dict[str, str] = {
            "NoRestart": str(no_restart).lower(),
            "Private": str(private).lower(),
        }
        for i, (env_name, value) in enumerate(envs.items()):
            form[f"Envs.{i}.Name"] = env_name
            form[f"Envs.{i}.Value"] = value
        self._request("POST", f"/apps/{name}/env", data=form)

    def unset_env_vars(self, name: str, names: Iterable[str], *, no_restart: bool = False) -> None:
        params = [("env", env_name) for env_name in names]
        params.append(("noRestart", str(no_restart).lower()))
        self._request("DELETE", f"/apps/{name}/env", params=params)

    def get_env_vars(self, name: str) -> list[EnvVar]:
        response = self._request("GET", f"/apps/{name}/env")
        return [
            EnvVar(name=item["name"], value=item.get("value", ""), public=item.get("public", True))
            for item in self._json(response) or []
        ]

    def close(self) -> None:
        """Close HTTP client."""
        self.client.close()

    def __enter__(self) -> "PlatformClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
