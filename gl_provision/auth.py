"""OAuth password-grant authentication."""

from __future__ import annotations

import logging
import re

from gl_provision.client import GitLabClient
from gl_provision.errors import AuthenticationError
from gl_provision.models import ACCESS_TOKEN_PATTERN, OAUTH_TOKEN_PATH

logger = logging.getLogger("gl-provision")


def get_token(client: GitLabClient, username: str, password: str) -> str:
    """Exchange a username and password for an OAuth access token.

    A 200 response is not enough on its own: the body must also carry an
    ``access_token`` shaped like a GitLab token, otherwise ``AuthenticationError``
    is raised with the observed status line.
    """
    logger.debug(f"Requesting OAuth token for user '{username}'")
    response = client.post_form(
        OAUTH_TOKEN_PATH,
        {"grant_type": "password", "username": username, "password": password},
        expected_status=200,
        api=False,
    )
    token = response.json.get("access_token") if isinstance(response.json, dict) else None
    if isinstance(token, str) and re.search(ACCESS_TOKEN_PATTERN, token):
        return token
    raise AuthenticationError(response.status, response.status_text)


def authenticate(client: GitLabClient, username: str, password: str) -> str:
    """Obtain a token and install it on the client."""
    token = get_token(client, username, password)
    client.set_token(token)
    logger.info(f"Authenticated to {client.base_url} as '{username}'")
    return token
