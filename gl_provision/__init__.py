"""
gl-provision: post-install provisioning for a GitLab instance.

Obtains an OAuth token, applies a license, disables public sign-up, and for each
group definition file creates (or finds) a GitLab group and links it to
Active Directory / LDAP groups at the configured role levels.

Environment:
    GITLAB_URL      - GitLab instance URL (default: https://gitlab.com)
    GITLAB_USERNAME - Admin user for the OAuth password grant (default: root)
    GITLAB_PASSWORD - Password for the OAuth password grant
    GITLAB_TOKEN    - Bearer token to use instead of the password grant
    GITLAB_LICENSE  - License key (alternative to --license-file)
    GITLAB_INSECURE - Set to 1 to skip TLS certificate verification
"""

from gl_provision.auth import authenticate, get_token
from gl_provision.client import GitLabClient
from gl_provision.errors import (
    AuthenticationError,
    DefinitionError,
    GroupCreationError,
    GroupDeleteError,
    GroupFetchError,
    GroupLookupError,
    LicenseError,
    LinkCreationError,
    ProvisioningError,
    SettingsError,
)
from gl_provision.groups import (
    add_ldap_group_link,
    create_group,
    delete_group,
    ensure_group_links,
    get_group,
    reconcile_group,
    search_groups,
)
from gl_provision.models import (
    DEFAULT_MAX_RETRIES,
    RETRY_BACKOFF_FACTOR,
    RETRYABLE_STATUS_CODES,
    ApiResponse,
    GroupDefinition,
    GroupResult,
    PermissionEntry,
    ProvisionReport,
)
from gl_provision.settings import apply_license, disable_signup, update_app_settings
from gl_provision.cli import main

__version__ = "0.1.0"
__all__ = [
    "main",
    "__version__",
    "GitLabClient",
    "ApiResponse",
    "GroupDefinition",
    "PermissionEntry",
    "GroupResult",
    "ProvisionReport",
    "DEFAULT_MAX_RETRIES",
    "RETRY_BACKOFF_FACTOR",
    "RETRYABLE_STATUS_CODES",
    "get_token",
    "authenticate",
    "search_groups",
    "get_group",
    "create_group",
    "delete_group",
    "add_ldap_group_link",
    "ensure_group_links",
    "reconcile_group",
    "apply_license",
    "update_app_settings",
    "disable_signup",
    "ProvisioningError",
    "AuthenticationError",
    "GroupLookupError",
    "GroupCreationError",
    "GroupFetchError",
    "GroupDeleteError",
    "LinkCreationError",
    "LicenseError",
    "SettingsError",
    "DefinitionError",
]
