"""Post-install provisioning pipeline."""

from __future__ import annotations

import logging
from pathlib import Path

import requests

from gl_provision.auth import authenticate
from gl_provision.client import GitLabClient
from gl_provision.errors import DefinitionError, ProvisioningError
from gl_provision.groups import ensure_group_links
from gl_provision.loader import list_group_files, load_group_definition, load_permissions
from gl_provision.logging_utils import describe_result
from gl_provision.models import GroupResult, ProvisionReport
from gl_provision.settings import apply_license, disable_signup

logger = logging.getLogger("gl-provision")


def record(result: GroupResult) -> GroupResult:
    """Log a group result; the formatter decides between JSON and a summary line."""
    level = logging.ERROR if result.action == "error" else logging.INFO
    entry = logger.makeRecord("gl-provision", level, "", 0, describe_result(result), (), None)
    entry.group_result = result
    logger.handle(entry)
    return result


def provision_group(client: GitLabClient, group_file: str | Path, permissions_file: str | Path) -> GroupResult:
    """Reconcile one group definition file. Failures are captured in the result."""
    source = Path(group_file).name
    group_path = ""
    try:
        definition = load_group_definition(group_file)
        group_path = definition.path
        permissions = load_permissions(permissions_file)
        outcome = ensure_group_links(client, definition, permissions)
    except (ProvisioningError, DefinitionError, requests.RequestException) as e:
        logger.error(f"Provisioning '{source}' failed: {e}")
        return record(GroupResult(source=source, group_path=group_path, action="error", detail=str(e)))

    return record(
        GroupResult(
            source=source,
            group_path=group_path,
            group_id=outcome.group.get("id"),
            action="created" if outcome.created else "already_exists",
            links_created=outcome.links_created,
            links_existing=outcome.links_existing,
        )
    )


def provision_groups(
    client: GitLabClient, groups_dir: str | Path, permissions_dir: str | Path, names: list[str] | None = None
) -> ProvisionReport:
    """Provision every group file, pairing it with the same-named permissions file."""
    report = ProvisionReport()
    for name in list_group_files(groups_dir) if names is None else names:
        report.results.append(provision_group(client, Path(groups_dir) / name, Path(permissions_dir) / name))
    return report


def run(
    client: GitLabClient,
    username: str,
    password: str | None,
    license_key: str | None,
    groups_dir: str | Path,
    permissions_dir: str | Path,
) -> ProvisionReport:
    """Authenticate, apply the license, disable sign-up, then provision all groups.

    Errors in the first three steps propagate. An unreadable groups directory
    raises ``DefinitionError`` before anything is sent. Group failures are
    collected in the returned report and do not stop the remaining groups.
    With ``password=None`` the client is expected to already hold a token.
    """
    names = list_group_files(groups_dir)

    if password is not None:
        authenticate(client, username, password)

    if license_key:
        apply_license(client, license_key)
    else:
        logger.warning("No license key given, skipping license step")

    disable_signup(client)

    report = provision_groups(client, groups_dir, permissions_dir, names)
    logger.info(
        f"Done: {len(report.results)} groups, {report.created} created, "
        f"{report.already_exists} already existed, {report.errors} errors"
    )
    return report
