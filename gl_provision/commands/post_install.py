"""Full post-install provisioning."""

from __future__ import annotations

import argparse

from gl_provision import provision
from gl_provision.commands.base import Command, register_command


@register_command("post-install")
class PostInstallCommand(Command):
    """Apply the license, disable sign-up, and provision every group definition."""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--groups-dir", required=True, help="Directory of group definition JSON files")
        parser.add_argument(
            "--permissions-dir",
            required=True,
            help="Directory of permission definition JSON files, named like the group files",
        )

    def run(self) -> int:
        if self.args.token:
            self.client.set_token(self.args.token)
        report = provision.run(
            self.client,
            username=self.args.username,
            password=None if self.args.token else self.args.password,
            license_key=self.args.license_key,
            groups_dir=self.args.groups_dir,
            permissions_dir=self.args.permissions_dir,
        )
        return 0 if report.ok else 1
