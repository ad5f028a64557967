"""``worker-offload config`` — print the inline configuration script.

Builds the configuration the bootstrap would attach, with ``--set``
overrides applied through the ``configuration`` filter, and prints the
``window.partytown`` merge expression to stdout.
"""

import argparse
import json
import sys
from typing import Any

from worker_offload.bootstrap import build_configuration, configuration_script
from worker_offload.config import OffloadConfig
from worker_offload.hooks import CONFIGURATION, Filters


def parse_override(raw: str) -> tuple[str, Any]:
    """Split ``KEY=JSON``. Values that are not valid JSON are kept as strings."""
    key, sep, value = raw.partition("=")
    if not sep or not key:
        msg = f"Expected KEY=JSON, got {raw!r}"
        raise ValueError(msg)
    try:
        return key, json.loads(value)
    except json.JSONDecodeError:
        return key, value


def run_config(args: argparse.Namespace) -> None:
    try:
        overrides = dict(parse_override(raw) for raw in args.overrides)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    kwargs: dict[str, Any] = {"debug": args.debug, "script_debug": args.debug}
    if args.lib_path is not None:
        kwargs["lib_path"] = args.lib_path
    config = OffloadConfig(**kwargs)

    filters = Filters()
    if overrides:
        filters.add(CONFIGURATION, lambda cfg: {**cfg, **overrides})

    print(configuration_script(build_configuration(config, filters)))
