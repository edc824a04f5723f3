"""Single-group commands."""

from __future__ import annotations

import argparse

from gl_provision.commands.base import Command, register_command
from gl_provision.groups import delete_group, get_group, reconcile_group, search_groups
from gl_provision.loader import load_group_definition, load_permissions


@register_command("add-group")
class AddGroupCommand(Command):
    """Create a group if needed and link its AD groups."""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("group_file", help="Group definition JSON file")
        parser.add_argument("permissions_file", help="Permission definition JSON file")

    def run(self) -> int:
        definition = load_group_definition(self.args.group_file)
        permissions = load_permissions(self.args.permissions_file)
        self.login()
        self.emit(reconcile_group(self.client, definition, permissions))
        return 0


@register_command("search-group")
class SearchGroupCommand(Command):
    """Search groups by name."""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("name", help="Group name to search for")

    def run(self) -> int:
        self.login()
        self.emit(search_groups(self.client, self.args.name))
        return 0


@register_command("get-group")
class GetGroupCommand(Command):
    """Show a group by ID."""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("group_id", type=int, help="Numeric group ID")

    def run(self) -> int:
        self.login()
        self.emit(get_group(self.client, self.args.group_id))
        return 0


@register_command("delete-group")
class DeleteGroupCommand(Command):
    """Delete a group by ID."""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("group_id", type=int, help="Numeric group ID")

    def run(self) -> int:
        self.login()
        delete_group(self.client, self.args.group_id)
        self.logger.info(f"Group {self.args.group_id} scheduled for deletion")
        return 0
