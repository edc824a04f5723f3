"""Base class and registry for CLI commands."""

from __future__ import annotations

import argparse
import json
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from gl_provision.auth import authenticate

if TYPE_CHECKING:
    from gl_provision.client import GitLabClient

# ---------------------------------------------------------------------------
# Command Registry
# ---------------------------------------------------------------------------

_command_registry: dict[str, type[Command]] = {}


def register_command(name: str):
    """Decorator to register a command class under a CLI subcommand name."""

    def decorator(cls):
        _command_registry[name] = cls
        cls.command_name = name
        return cls

    return decorator


def get_command_registry() -> dict[str, type[Command]]:
    """Get the command registry."""
    return _command_registry


# ---------------------------------------------------------------------------
# Command Base Class
# ---------------------------------------------------------------------------


class Command(ABC):
    """Base class for all commands."""

    command_name: str = ""

    def __init__(self, client: GitLabClient, args: argparse.Namespace):
        self.client = client
        self.args = args
        self.logger = logging.getLogger("gl-provision")

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        """Add command-specific CLI arguments."""

    @abstractmethod
    def run(self) -> int:
        """Execute the command and return the process exit code."""
        ...

    def login(self) -> None:
        """Use GITLAB_TOKEN when given, otherwise the OAuth password grant."""
        if self.args.token:
            self.client.set_token(self.args.token)
        else:
            authenticate(self.client, self.args.username, self.args.password)

    @staticmethod
    def emit(data: Any) -> None:
        """Write command output as JSON to stdout."""
        print(json.dumps(data, indent=2, sort_keys=True))
