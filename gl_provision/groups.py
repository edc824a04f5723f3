"""Group lookup, deletion, and LDAP group link reconciliation."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from gl_provision.client import GitLabClient
from gl_provision.errors import (
    GroupCreationError,
    GroupDeleteError,
    GroupFetchError,
    GroupLookupError,
    LinkCreationError,
)
from gl_provision.models import LDAP_PROVIDER, GroupDefinition, PermissionEntry

logger = logging.getLogger("gl-provision")


@dataclass
class Reconciliation:
    """Final group state plus what a reconciliation had to do to reach it."""

    group: dict
    created: bool
    links_created: int = 0
    links_existing: int = 0


# ---------------------------------------------------------------------------
# Lookup / deletion
# ---------------------------------------------------------------------------


def search_groups(client: GitLabClient, name: str) -> list[dict]:
    """Search groups by name. No match is an empty list, not an error."""
    response = client.get_json("/groups", params={"search": name})
    if response.json is None:
        raise GroupLookupError(response.status, response.status_text)
    return response.json


def get_group(client: GitLabClient, group_id: int) -> dict:
    response = client.get_json(f"/groups/{group_id}")
    if response.json is None:
        raise GroupFetchError(response.status, response.status_text)
    return response.json


def delete_group(client: GitLabClient, group_id: int) -> None:
    """Schedule a group for deletion. GitLab answers 202 Accepted."""
    response = client.delete(f"/groups/{group_id}", expected_status=202)
    if response.status != 202:
        raise GroupDeleteError(response.status, response.status_text)
    logger.debug(f"Deleted group {group_id}")


def create_group(client: GitLabClient, definition: GroupDefinition) -> dict:
    response = client.post_json("/groups", definition.to_payload(), expected_status=201)
    if response.json is None:
        raise GroupCreationError(response.status, response.status_text)
    return response.json


def add_ldap_group_link(client: GitLabClient, group_id: int, cn: str, group_access: int) -> dict:
    """Link an AD group (by common name) to a group at the given access level."""
    response = client.post_form(
        f"/groups/{group_id}/ldap_group_links",
        {"cn": cn, "group_access": group_access, "provider": LDAP_PROVIDER},
        expected_status=201,
    )
    if response.json is None:
        logger.debug(f"Error adding link for AD group '{cn}'")
        raise LinkCreationError(cn, response.status, response.status_text)
    logger.debug(f"Successfully added link for AD group '{cn}'")
    return response.json


# ---------------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------------


def resolve_group(client: GitLabClient, definition: GroupDefinition) -> tuple[dict, bool]:
    """Find the group whose path matches the definition, or create it.

    Name search can return near-matches, so the path decides. Returns the group
    and whether it was created.
    """
    matches = [g for g in search_groups(client, definition.name) if g.get("path") == definition.path]
    if len(matches) == 1:
        logger.debug(f"The group '{definition.name}' already exists")
        group = matches[0]
        # List results may omit the links; compare against the full record.
        if "ldap_group_links" not in group:
            group = get_group(client, group["id"])
        return group, False

    logger.debug(f"Creating group '{definition.name}'")
    return create_group(client, definition), True


def ensure_group_links(
    client: GitLabClient, definition: GroupDefinition, permissions: Sequence[PermissionEntry]
) -> Reconciliation:
    """Ensure the group exists and every desired AD group link is present.

    Links are matched on ``cn`` only. Existing links are never updated or
    removed, and links created before a failure are left in place.
    """
    group, created = resolve_group(client, definition)
    existing = {link.get("cn"): link for link in group.get("ldap_group_links") or []}
    result = Reconciliation(group=group, created=created)

    logger.debug(f"Reconciling AD group links for group '{definition.name}'")
    for permission in permissions:
        level = permission.gitlab_role_level
        if not permission.active_directory_groups:
            logger.info(f"No Active Directory groups defined for GitLab role level {level}")
            continue

        for cn in permission.active_directory_groups:
            link = existing.get(cn)
            if link is not None:
                if link.get("group_access") != level:
                    logger.warning(
                        f"Link for AD group '{cn}' exists with access {link.get('group_access')}, "
                        f"not {level}; leaving it unchanged"
                    )
                else:
                    logger.debug(f"Link for AD group '{cn}' already exists")
                result.links_existing += 1
                continue

            add_ldap_group_link(client, group["id"], cn, level)
            existing[cn] = {"cn": cn, "group_access": level, "provider": LDAP_PROVIDER}
            result.links_created += 1
        logger.debug(f"Finished AD group links for GitLab role level {level}")

    result.group = get_group(client, group["id"])
    return result


def reconcile_group(
    client: GitLabClient, definition: GroupDefinition, permissions: Sequence[PermissionEntry]
) -> dict:
    """Reconcile a group and its AD group links; return the group as GitLab now reports it."""
    return ensure_group_links(client, definition, permissions).group
