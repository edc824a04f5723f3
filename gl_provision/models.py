"""Data models and constants for gl-provision."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_GITLAB_URL = "https://gitlab.com"
DEFAULT_USERNAME = "root"
API_V4 = "/api/v4"
OAUTH_TOKEN_PATH = "/oauth/token"
LDAP_PROVIDER = "ldapmain"
DEFAULT_TIMEOUT = 30.0  # seconds

# Retry configuration (opt-in; provisioning fails fast by default)
DEFAULT_MAX_RETRIES = 0
RETRY_BACKOFF_FACTOR = 0.5  # seconds
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

# OAuth access tokens issued by GitLab are 64 lowercase hex characters
ACCESS_TOKEN_PATTERN = r"[a-z0-9]{64}"

# GitLab access level constants
ACCESS_LEVELS = {
    "no_access": 0,
    "minimal": 5,
    "guest": 10,
    "reporter": 20,
    "developer": 30,
    "maintainer": 40,
    "owner": 50,
}


# ---------------------------------------------------------------------------
# Data Classes
# ---------------------------------------------------------------------------


@dataclass
class ApiResponse:
    """Normalized HTTP response. ``json`` is only set when the expected status was returned."""

    status: int
    status_text: str
    json: Any = None


@dataclass(frozen=True)
class GroupDefinition:
    """Desired GitLab group, as read from a group definition file."""

    name: str
    path: str
    description: str | None = None
    visibility: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GroupDefinition:
        known = {"name", "path", "description", "visibility"}
        return cls(
            name=data["name"],
            path=data["path"],
            description=data.get("description"),
            visibility=data.get("visibility"),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_payload(self) -> dict[str, Any]:
        """Body for ``POST /groups``."""
        payload: dict[str, Any] = {"name": self.name, "path": self.path}
        if self.description is not None:
            payload["description"] = self.description
        if self.visibility is not None:
            payload["visibility"] = self.visibility
        payload.update(self.extra)
        return payload


@dataclass(frozen=True)
class PermissionEntry:
    """One GitLab role level and the AD groups to link at that level."""

    gitlab_role_level: int
    active_directory_groups: tuple[str, ...] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PermissionEntry:
        level = data["gitlabRoleLevel"]
        if isinstance(level, str) and level.lower() in ACCESS_LEVELS:
            level = ACCESS_LEVELS[level.lower()]
        groups = data.get("activeDirectoryGroups")
        if groups is not None and (not isinstance(groups, list) or not all(isinstance(g, str) for g in groups)):
            raise TypeError("activeDirectoryGroups must be a list of group names")
        return cls(
            gitlab_role_level=int(level),
            active_directory_groups=tuple(groups) if groups else None,
        )


@dataclass
class GroupResult:
    """Outcome of provisioning a single group definition file."""

    source: str
    group_path: str
    action: str  # "created", "already_exists", "error"
    group_id: int | None = None
    links_created: int = 0
    links_existing: int = 0
    detail: str = ""

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "group_path": self.group_path,
            "group_id": self.group_id,
            "action": self.action,
            "links_created": self.links_created,
            "links_existing": self.links_existing,
            "detail": self.detail,
        }


@dataclass
class ProvisionReport:
    """Aggregate of all per-group results from one provisioning run."""

    results: list[GroupResult] = field(default_factory=list)

    @property
    def created(self) -> int:
        return sum(1 for r in self.results if r.action == "created")

    @property
    def already_exists(self) -> int:
        return sum(1 for r in self.results if r.action == "already_exists")

    @property
    def errors(self) -> int:
        return sum(1 for r in self.results if r.action == "error")

    @property
    def ok(self) -> bool:
        return self.errors == 0
