"""Commands for gl-provision."""

from gl_provision.commands.base import Command, get_command_registry, register_command

# Import all commands to register them
from gl_provision.commands.group import AddGroupCommand, DeleteGroupCommand, GetGroupCommand, SearchGroupCommand
from gl_provision.commands.instance import ApplyLicenseCommand, DisableSignupCommand
from gl_provision.commands.post_install import PostInstallCommand

__all__ = [
    "Command",
    "register_command",
    "get_command_registry",
    "PostInstallCommand",
    "AddGroupCommand",
    "SearchGroupCommand",
    "GetGroupCommand",
    "DeleteGroupCommand",
    "ApplyLicenseCommand",
    "DisableSignupCommand",
]
