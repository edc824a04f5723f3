"""Integration tests for the post-install pipeline."""

import sys
from pathlib import Path

import pytest
import responses

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Constants
MOCK_GITLAB_URL = "https://gitlab.example.com"
MOCK_API_URL = f"{MOCK_GITLAB_URL}/api/v4"
VALID_TOKEN = "0123456789abcdef" * 4

from gl_provision import AuthenticationError, DefinitionError, GitLabClient, LicenseError
from gl_provision.provision import provision_group, provision_groups, run


def add_instance_setup_responses():
    responses.add(responses.POST, f"{MOCK_GITLAB_URL}/oauth/token", json={"access_token": VALID_TOKEN})
    responses.add(responses.POST, f"{MOCK_API_URL}/license", json={"id": 1}, status=201)
    responses.add(responses.PUT, f"{MOCK_API_URL}/application/settings", json={"signup_enabled": False})


@pytest.fixture
def qa_files(definition_dirs):
    groups_dir, permissions_dir, write = definition_dirs
    write(groups_dir, "qa.json", {"name": "QA", "path": "qa"})
    write(permissions_dir, "qa.json", [{"gitlabRoleLevel": 30, "activeDirectoryGroups": ["AD-QA-Dev"]}])
    return groups_dir, permissions_dir, write


class TestProvisionGroup:
    @responses.activate
    def test_created_result(self, mock_client, qa_files, qa_group, qa_group_linked):
        groups_dir, permissions_dir, _ = qa_files
        responses.add(responses.GET, f"{MOCK_API_URL}/groups", json=[])
        responses.add(responses.POST, f"{MOCK_API_URL}/groups", json=qa_group, status=201)
        responses.add(responses.POST, f"{MOCK_API_URL}/groups/10/ldap_group_links", json={}, status=201)
        responses.add(responses.GET, f"{MOCK_API_URL}/groups/10", json=qa_group_linked)

        result = provision_group(mock_client, groups_dir / "qa.json", permissions_dir / "qa.json")

        assert result.action == "created"
        assert result.group_id == 10
        assert result.group_path == "qa"
        assert result.links_created == 1

    @responses.activate
    def test_missing_permissions_file_is_an_error_result(self, mock_client, qa_files):
        groups_dir, permissions_dir, write = qa_files
        write(groups_dir, "dev.json", {"name": "Dev", "path": "dev"})

        result = provision_group(mock_client, groups_dir / "dev.json", permissions_dir / "dev.json")

        assert result.action == "error"
        assert result.source == "dev.json"
        assert result.group_path == "dev"
        assert len(responses.calls) == 0

    @responses.activate
    def test_api_failure_is_an_error_result(self, mock_client, qa_files):
        groups_dir, permissions_dir, _ = qa_files
        responses.add(responses.GET, f"{MOCK_API_URL}/groups", status=500)

        result = provision_group(mock_client, groups_dir / "qa.json", permissions_dir / "qa.json")

        assert result.action == "error"
        assert "500" in result.detail


class TestProvisionGroups:
    @responses.activate
    def test_one_failure_does_not_stop_the_others(self, mock_client, qa_files, qa_group_linked):
        """Group files are processed in name order and each outcome is reported."""
        groups_dir, permissions_dir, write = qa_files
        write(groups_dir, "dev.json", {"name": "Dev", "path": "dev"})  # no permissions file
        write(groups_dir, "ops.json", {"name": "Ops"})  # invalid definition
        write(permissions_dir, "ops.json", [])
        responses.add(responses.GET, f"{MOCK_API_URL}/groups", json=[qa_group_linked])
        responses.add(responses.GET, f"{MOCK_API_URL}/groups/10", json=qa_group_linked)

        report = provision_groups(mock_client, groups_dir, permissions_dir)

        assert [r.source for r in report.results] == ["dev.json", "ops.json", "qa.json"]
        assert [r.action for r in report.results] == ["error", "error", "already_exists"]
        assert report.errors == 2
        assert report.already_exists == 1
        assert report.ok is False

    @responses.activate
    def test_empty_directory(self, mock_client, definition_dirs):
        groups_dir, permissions_dir, _ = definition_dirs

        report = provision_groups(mock_client, groups_dir, permissions_dir)

        assert report.results == []
        assert report.ok is True

    @responses.activate
    def test_undecodable_file_does_not_stop_the_others(self, mock_client, qa_files, qa_group_linked):
        groups_dir, permissions_dir, write = qa_files
        (groups_dir / "a.json").write_bytes(b'{"name": "\xff\xfe"}')
        write(permissions_dir, "a.json", [])
        responses.add(responses.GET, f"{MOCK_API_URL}/groups", json=[qa_group_linked])
        responses.add(responses.GET, f"{MOCK_API_URL}/groups/10", json=qa_group_linked)

        report = provision_groups(mock_client, groups_dir, permissions_dir)

        assert [r.action for r in report.results] == ["error", "already_exists"]
        assert "not UTF-8" in report.results[0].detail


class TestRun:
    @responses.activate
    def test_full_pipeline_order(self, qa_files, qa_group, qa_group_linked):
        groups_dir, permissions_dir, _ = qa_files
        add_instance_setup_responses()
        responses.add(responses.GET, f"{MOCK_API_URL}/groups", json=[])
        responses.add(responses.POST, f"{MOCK_API_URL}/groups", json=qa_group, status=201)
        responses.add(responses.POST, f"{MOCK_API_URL}/groups/10/ldap_group_links", json={}, status=201)
        responses.add(responses.GET, f"{MOCK_API_URL}/groups/10", json=qa_group_linked)

        client = GitLabClient(MOCK_GITLAB_URL)
        report = run(client, "root", "s3cret", "LICENSE", groups_dir, permissions_dir)

        urls = [c.request.url.split("?")[0] for c in responses.calls]
        assert urls[:3] == [
            f"{MOCK_GITLAB_URL}/oauth/token",
            f"{MOCK_API_URL}/license",
            f"{MOCK_API_URL}/application/settings",
        ]
        assert report.created == 1
        assert report.ok is True
        assert responses.calls[-1].request.headers["Authorization"] == f"Bearer {VALID_TOKEN}"

    @responses.activate
    def test_without_license_key(self, definition_dirs):
        groups_dir, permissions_dir, _ = definition_dirs
        responses.add(responses.PUT, f"{MOCK_API_URL}/application/settings", json={})

        client = GitLabClient(MOCK_GITLAB_URL, VALID_TOKEN)
        report = run(client, "root", None, None, groups_dir, permissions_dir)

        assert report.ok is True
        assert [c.request.method for c in responses.calls] == ["PUT"]

    @responses.activate
    def test_authentication_failure_stops_pipeline(self, qa_files):
        groups_dir, permissions_dir, _ = qa_files
        responses.add(responses.POST, f"{MOCK_GITLAB_URL}/oauth/token", status=401)

        client = GitLabClient(MOCK_GITLAB_URL)
        with pytest.raises(AuthenticationError):
            run(client, "root", "wrong", "LICENSE", groups_dir, permissions_dir)

        assert len(responses.calls) == 1

    @responses.activate
    def test_license_failure_stops_pipeline(self, qa_files):
        groups_dir, permissions_dir, _ = qa_files
        responses.add(responses.POST, f"{MOCK_GITLAB_URL}/oauth/token", json={"access_token": VALID_TOKEN})
        responses.add(responses.POST, f"{MOCK_API_URL}/license", status=400)

        client = GitLabClient(MOCK_GITLAB_URL)
        with pytest.raises(LicenseError):
            run(client, "root", "s3cret", "LICENSE", groups_dir, permissions_dir)

        assert len(responses.calls) == 2

    @responses.activate
    def test_missing_groups_directory_fails_before_any_request(self, tmp_path):
        client = GitLabClient(MOCK_GITLAB_URL)

        with pytest.raises(DefinitionError):
            run(client, "root", "s3cret", "LICENSE", tmp_path / "nope", tmp_path / "permissions")

        assert len(responses.calls) == 0
