"""Offloading configuration.

OffloadConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path

BUILD_DIR = Path(__file__).parent / "build"


@dataclass(frozen=True, slots=True)
class OffloadConfig:
    """Worker offloading configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = OffloadConfig(lib_path="/assets/partytown/", script_debug=True)
    """

    # Partytown lib directory as served to the browser (the ``lib`` config key)
    lib_path: str = "/static/partytown/"

    # Where partytown.js and debug/partytown.js live on disk
    build_dir: str | Path = BUILD_DIR

    # The ``debug`` config key needs both flags
    debug: bool = False
    script_debug: bool = False  # Also selects the unminified snippet

    # Bootstrap script handle
    handle: str = "web-worker-offloading"

    # <meta name="generator"> in head output
    generator: bool = True

    @property
    def debug_build(self) -> bool:
        """True when the runtime should be told to run in debug mode."""
        return self.debug and self.script_debug

    @property
    def snippet_path(self) -> Path:
        """Filesystem path of the snippet variant selected by ``script_debug``."""
        base = Path(self.build_dir)
        if self.script_debug:
            return base / "debug" / "partytown.js"
        return base / "partytown.js"
