"""Partytown bootstrap — configuration object plus runtime snippet.

The bootstrap handle prints nothing of its own (no ``src``). Its output is
two inline scripts:

**Before**: the configuration object, merged into whatever an earlier
script already put on ``window.partytown``::

    window.partytown = {...(window.partytown || {}), ...{"lib":"/static/partytown/"}};

**After**: the Partytown snippet, read from ``build_dir`` once at
registration time.

Configuration options that cannot be expressed as JSON (``resolveUrl``
and other functions) are added as raw JavaScript instead of through the
``configuration`` filter::

    registry.add_inline_script(
        "web-worker-offloading",
        "window.partytown = {...(window.partytown || {}), resolveUrl: (u) => u};",
        "before",
    )

Configuration reference: https://partytown.builder.io/configuration
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from worker_offload import __version__
from worker_offload.config import OffloadConfig
from worker_offload.hooks import CONFIGURATION, Filters
from worker_offload.registry import ScriptRegistry

logger = logging.getLogger("worker_offload.bootstrap")


def build_configuration(
    config: OffloadConfig,
    filters: Filters | None = None,
) -> dict[str, Any]:
    """Build the Partytown configuration object.

    Always contains ``lib``. ``debug`` is only added when both debug flags
    are on. The ``configuration`` filter may add or override keys; a
    filter result that is not a mapping is discarded.
    """
    base: dict[str, Any] = {"lib": config.lib_path}
    if config.debug_build:
        base["debug"] = True

    if filters is None:
        return base
    filtered = filters.apply(CONFIGURATION, dict(base))
    if not isinstance(filtered, Mapping):
        logger.warning(
            "Ignoring %r filter result of type %s; expected a mapping",
            CONFIGURATION,
            type(filtered).__name__,
        )
        return base
    return dict(filtered)


def encode_configuration(configuration: Mapping[str, Any]) -> str:
    """Serialize *configuration* as JSON that is safe inside ``<script>``.

    ``<`` and ``>`` are written as unicode escapes so a value can never
    close the surrounding script element.

    Raises ``TypeError`` or ``ValueError`` for values JSON cannot represent.
    """
    encoded = json.dumps(dict(configuration), separators=(",", ":"), allow_nan=False)
    return encoded.replace("<", "\\u003C").replace(">", "\\u003E")


def configuration_script(configuration: Mapping[str, Any]) -> str:
    """Inline script merging *configuration* into ``window.partytown``."""
    encoded = encode_configuration(configuration)
    return f"window.partytown = {{...(window.partytown || {{}}), ...{encoded}}};"


def load_runtime_snippet(config: OffloadConfig) -> str | None:
    """Read the Partytown snippet, ``None`` when the asset is unreadable."""
    path = config.snippet_path
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Partytown snippet unavailable at %s: %s", path, exc)
        return None


def register_bootstrap(
    registry: ScriptRegistry,
    config: OffloadConfig,
    filters: Filters | None = None,
) -> bool:
    """Register the bootstrap handle with its configuration and snippet.

    Returns ``False`` without registering anything when the snippet asset
    is missing or the configuration cannot be serialized, and when the
    handle was already registered.
    """
    snippet = load_runtime_snippet(config)
    if snippet is None:
        return False

    try:
        script = configuration_script(build_configuration(config, filters))
    except (TypeError, ValueError) as exc:
        logger.warning("Partytown configuration is not JSON serializable: %s", exc)
        return False

    if not registry.add(config.handle, "", version=__version__, in_footer=False):
        logger.debug("Bootstrap handle %r already registered", config.handle)
        return False

    registry.add_inline_script(config.handle, script, "before")
    registry.add_inline_script(config.handle, snippet)
    return True
