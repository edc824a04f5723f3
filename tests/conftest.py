"""Shared test fixtures for gl-provision tests."""

import json
import sys
from pathlib import Path
from typing import Any

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gl_provision.client import GitLabClient
from gl_provision.models import GroupDefinition, PermissionEntry

# Constants for use in tests - pytest makes conftest.py fixtures available,
# but these constants need to be imported directly from tests
MOCK_GITLAB_URL = "https://gitlab.example.com"
MOCK_API_URL = f"{MOCK_GITLAB_URL}/api/v4"
VALID_TOKEN = "0123456789abcdef" * 4

ENV_VARS = (
    "GITLAB_URL",
    "GITLAB_USERNAME",
    "GITLAB_PASSWORD",
    "GITLAB_TOKEN",
    "GITLAB_LICENSE",
    "GITLAB_INSECURE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's GitLab environment out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_client():
    """GitLabClient pointing at mock server, already holding a token."""
    return GitLabClient(MOCK_GITLAB_URL, VALID_TOKEN)


@pytest.fixture
def qa_definition() -> GroupDefinition:
    return GroupDefinition(name="QA", path="qa", description="Quality assurance", visibility="private")


@pytest.fixture
def qa_permissions() -> list[PermissionEntry]:
    return [PermissionEntry(gitlab_role_level=30, active_directory_groups=("AD-QA-Dev",))]


@pytest.fixture
def qa_group() -> dict[str, Any]:
    """Group API response for a freshly created QA group."""
    return {"id": 10, "name": "QA", "path": "qa", "visibility": "private"}


@pytest.fixture
def qa_group_linked(qa_group) -> dict[str, Any]:
    """QA group carrying the AD-QA-Dev link."""
    return {
        **qa_group,
        "ldap_group_links": [{"cn": "AD-QA-Dev", "group_access": 30, "provider": "ldapmain"}],
    }


@pytest.fixture
def definition_dirs(tmp_path):
    """Empty groups/ and permissions/ directories plus a writer for JSON files."""
    groups_dir = tmp_path / "groups"
    permissions_dir = tmp_path / "permissions"
    groups_dir.mkdir()
    permissions_dir.mkdir()

    def write(directory: Path, name: str, data: Any) -> Path:
        path = directory / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return groups_dir, permissions_dir, write
