"""License and application settings."""

from __future__ import annotations

import logging
from typing import Any

from gl_provision.client import GitLabClient
from gl_provision.errors import LicenseError, SettingsError

logger = logging.getLogger("gl-provision")


def apply_license(client: GitLabClient, license_key: str) -> dict:
    response = client.post_form("/license", {"license": license_key.strip()}, expected_status=201)
    if response.json is None:
        raise LicenseError(response.status, response.status_text)
    logger.info("License applied")
    return response.json


def update_app_settings(client: GitLabClient, settings: dict[str, Any]) -> dict:
    """Update instance-wide application settings with a form-encoded PUT."""
    form = {key: str(value).lower() if isinstance(value, bool) else value for key, value in settings.items()}
    response = client.put_form("/application/settings", form, expected_status=200)
    if response.json is None:
        raise SettingsError(response.status, response.status_text)
    return response.json


def disable_signup(client: GitLabClient) -> dict:
    result = update_app_settings(client, {"signup_enabled": False})
    logger.info("Public sign-up disabled")
    return result
