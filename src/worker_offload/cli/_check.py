"""``worker-offload check`` — verify the Partytown snippet is readable.

Without the snippet the bootstrap is never registered and no script is
offloaded. Exits with code 1 if the asset cannot be read.
"""

import argparse
import sys

from worker_offload.bootstrap import load_runtime_snippet
from worker_offload.config import OffloadConfig


def run_check(args: argparse.Namespace) -> None:
    if args.build_dir is not None:
        config = OffloadConfig(build_dir=args.build_dir, script_debug=args.script_debug)
    else:
        config = OffloadConfig(script_debug=args.script_debug)

    snippet = load_runtime_snippet(config)
    if snippet is None:
        print(f"Error: cannot read {config.snippet_path}", file=sys.stderr)
        raise SystemExit(1)
    print(f"ok: {config.snippet_path} ({len(snippet)} bytes)")
