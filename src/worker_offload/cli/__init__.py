"""worker-offload CLI — configuration preview and asset checks.

Entry point registered as ``worker-offload`` in ``pyproject.toml``::

    [project.scripts]
    worker-offload = "worker_offload.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``worker-offload`` command."""
    parser = argparse.ArgumentParser(
        prog="worker-offload",
        description="Offload third-party scripts to a web worker with Partytown.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- worker-offload config --------------------------------------------
    config_parser = subparsers.add_parser(
        "config", help="Print the inline Partytown configuration script"
    )
    config_parser.add_argument("--lib-path", default=None, help="URL path of the Partytown lib")
    config_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Partytown debug mode",
    )
    config_parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=JSON",
        help="Add or override a configuration key (repeatable)",
    )

    # -- worker-offload check ---------------------------------------------
    check_parser = subparsers.add_parser("check", help="Check the Partytown snippet asset")
    check_parser.add_argument("--build-dir", default=None, help="Directory holding partytown.js")
    check_parser.add_argument(
        "--script-debug",
        action="store_true",
        help="Check the unminified debug/partytown.js instead",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "config":
        from worker_offload.cli._config import run_config

        run_config(args)
    elif args.command == "check":
        from worker_offload.cli._check import run_check

        run_check(args)
