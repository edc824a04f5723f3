"""Instance-wide license and settings commands."""

from __future__ import annotations

from gl_provision.commands.base import Command, register_command
from gl_provision.settings import apply_license, disable_signup


@register_command("apply-license")
class ApplyLicenseCommand(Command):
    """Upload the license key given by --license-file or GITLAB_LICENSE."""

    def run(self) -> int:
        if not self.args.license_key:
            self.logger.error("No license key given (use --license-file or GITLAB_LICENSE).")
            return 1
        self.login()
        self.emit(apply_license(self.client, self.args.license_key))
        return 0


@register_command("disable-signup")
class DisableSignupCommand(Command):
    """Turn off public sign-up."""

    def run(self) -> int:
        self.login()
        self.emit(disable_signup(self.client))
        return 0
