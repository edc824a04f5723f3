"""CLI entry point for gl-provision."""

from __future__ import annotations

import argparse
import os
import sys

import requests

# Ensure all commands are registered by importing the commands package
import gl_provision.commands  # noqa: F401
from gl_provision.client import GitLabClient
from gl_provision.commands import get_command_registry
from gl_provision.errors import DefinitionError, ProvisioningError
from gl_provision.logging_utils import setup_logging
from gl_provision.models import DEFAULT_GITLAB_URL, DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT, DEFAULT_USERNAME

TRUTHY = {"1", "true", "yes", "on"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gl-provision",
        description="Provision a freshly installed GitLab instance: license, sign-up, groups and LDAP links.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
    GITLAB_URL      - GitLab instance URL (default: https://gitlab.com)
    GITLAB_USERNAME - Admin user for the OAuth password grant (default: root)
    GITLAB_PASSWORD - Password for the OAuth password grant
    GITLAB_TOKEN    - Bearer token to use instead of the password grant
    GITLAB_LICENSE  - License key (alternative to --license-file)
    GITLAB_INSECURE - Set to 1 to skip TLS certificate verification

Examples:
    # Full post-install run against a self-signed instance
    gl-provision --insecure post-install --groups-dir groups --permissions-dir permissions \\
        --license-file gitlab.gitlab-license

    # Provision a single group
    gl-provision add-group groups/qa.json permissions/qa.json

    # JSON output for machine parsing
    gl-provision --json post-install --groups-dir groups --permissions-dir permissions
""",
    )
    parser.add_argument(
        "--json", action="store_true", dest="json_output", help="Output results as JSON lines (to stderr)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--gitlab-url", default=None, help="GitLab instance URL (default: from GITLAB_URL env or https://gitlab.com)"
    )
    parser.add_argument(
        "--username", default=None, help="User for the password grant (default: from GITLAB_USERNAME env or root)"
    )
    parser.add_argument("--license-file", default=None, help="File containing the GitLab license key")
    parser.add_argument("--insecure", action="store_true", help="Do not verify the server's TLS certificate")
    parser.add_argument(
        "--max-retries",
        type=int,
        default=DEFAULT_MAX_RETRIES,
        help=f"Maximum retry attempts for transient errors (default: {DEFAULT_MAX_RETRIES})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Per-request timeout in seconds (default: {DEFAULT_TIMEOUT:g})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    registry = get_command_registry()
    for name, cmd_cls in sorted(registry.items()):
        sub = subparsers.add_parser(name, help=cmd_cls.__doc__)
        cmd_cls.add_arguments(sub)

    return parser


def resolve_config(args: argparse.Namespace) -> argparse.Namespace:
    """Fill connection settings from the environment where no flag was given."""
    args.gitlab_url = args.gitlab_url or os.environ.get("GITLAB_URL", DEFAULT_GITLAB_URL)
    args.username = args.username or os.environ.get("GITLAB_USERNAME", DEFAULT_USERNAME)
    args.password = os.environ.get("GITLAB_PASSWORD")
    args.token = os.environ.get("GITLAB_TOKEN")
    args.insecure = args.insecure or os.environ.get("GITLAB_INSECURE", "").lower() in TRUTHY
    if args.license_file:
        with open(args.license_file, encoding="utf-8") as f:
            args.license_key = f.read().strip()
    else:
        args.license_key = os.environ.get("GITLAB_LICENSE")
    return args


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        resolve_config(args)
    except OSError as e:
        print(f"ERROR: Cannot read license file: {e}", file=sys.stderr)
        return 1

    if not args.token and not args.password:
        print("ERROR: Set GITLAB_PASSWORD (or GITLAB_TOKEN) in the environment.", file=sys.stderr)
        return 1

    # Setup logging
    logger = setup_logging(json_mode=args.json_output, verbose=args.verbose)

    # Build client
    client = GitLabClient(
        base_url=args.gitlab_url,
        insecure=args.insecure,
        max_retries=args.max_retries,
        timeout=args.timeout,
    )

    registry = get_command_registry()
    command = registry[args.command](client=client, args=args)

    try:
        return command.run()
    except (ProvisioningError, DefinitionError) as e:
        logger.error(str(e))
        return 1
    except requests.RequestException as e:
        logger.error(f"Fatal request error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
