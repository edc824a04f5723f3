"""Exceptions raised by gl-provision operations."""

from __future__ import annotations


class ProvisioningError(Exception):
    """An endpoint returned an unexpected status code or payload.

    The message is built from the status line only, never from the response body.

    Attributes:
        endpoint: Short name of the GitLab endpoint that failed
        status: HTTP status code returned
        status_text: HTTP reason phrase returned
    """

    endpoint = "GitLab"
    problem = "didn't return a JSON payload"

    def __init__(self, status: int, status_text: str):
        self.status = status
        self.status_text = status_text
        super().__init__(self._message())

    def _message(self) -> str:
        return (
            f"The {self.endpoint} endpoint {self.problem}. The status code returned was {self.status} "
            f"and the status text returned was '{self.status_text}'."
        )


class AuthenticationError(ProvisioningError):
    """The OAuth token endpoint did not hand out a usable access token."""

    endpoint = "token"
    problem = "didn't return an access token"


class GroupLookupError(ProvisioningError):
    endpoint = "search groups"


class GroupCreationError(ProvisioningError):
    endpoint = "groups"


class GroupFetchError(ProvisioningError):
    """Group does not exist or could not be read."""

    endpoint = "get groups"


class GroupDeleteError(ProvisioningError):
    endpoint = "delete group"
    problem = "didn't return the expected status code"


class LinkCreationError(ProvisioningError):
    """An LDAP group link could not be added to a group."""

    endpoint = "ldap group links"

    def __init__(self, cn: str, status: int, status_text: str):
        self.cn = cn
        super().__init__(status, status_text)

    def _message(self) -> str:
        return (
            f"An error was encountered while trying to add the link for AD Group '{self.cn}'. "
            f"The status code returned was {self.status} and the status text returned was '{self.status_text}'."
        )


class LicenseError(ProvisioningError):
    endpoint = "license"


class SettingsError(ProvisioningError):
    endpoint = "settings"


class DefinitionError(ValueError):
    """A group or permission definition file is missing or malformed."""
