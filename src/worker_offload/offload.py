"""Worker offloading stages for the script render pipeline.

Scripts opt in per handle::

    registry.add("gtag", "https://www.googletagmanager.com/gtag/js?id=G-1")
    registry.add_data("gtag", "worker", True)

``WorkerOffloading`` then does three things when scripts are printed:

- puts the bootstrap handle first, in the head, when anything opted in
- marks the opted-in ``<script id="{handle}-js">`` as ``type="text/partytown"``
- marks its inline ``{handle}-js-before`` / ``{handle}-js-after`` blocks too

The Partytown runtime picks up ``text/partytown`` scripts and runs them
in a web worker. Every stage passes its input through untouched when it
cannot apply, so a misconfigured page still renders.
"""

import html
import re
import sys
from collections.abc import Iterable, Mapping
from typing import Any

from worker_offload import __version__
from worker_offload.bootstrap import register_bootstrap
from worker_offload.config import OffloadConfig
from worker_offload.hooks import INLINE_SCRIPT_ATTRIBUTES, PRINT_SCRIPTS, SCRIPT_TAG, Filters
from worker_offload.html import TagProcessor
from worker_offload.registry import HEAD, ScriptRegistry

PARTYTOWN_TYPE = "text/partytown"

_INLINE_ID = re.compile(r"^(?P<handle>.+)-js-(?:before|after)$", re.DOTALL)


class WorkerOffloading:
    """Bundle of offloading stages bound to one registry.

    Call ``install()`` once while setting up the page's scripts; it
    registers the bootstrap handle and adds the stages to *filters*.
    """

    __slots__ = ("_installed", "config", "filters", "registry")

    def __init__(
        self,
        registry: ScriptRegistry,
        config: OffloadConfig | None = None,
        filters: Filters | None = None,
    ) -> None:
        self.registry = registry
        self.config = config or OffloadConfig()
        self.filters = filters if filters is not None else Filters()
        self._installed = False

    def install(self) -> bool:
        """Register the bootstrap and attach the render stages.

        Returns whether the bootstrap was registered. The stages are
        attached either way; without a bootstrap the opted-in scripts are
        still marked, and the Partytown runtime is expected elsewhere.
        Repeated calls leave the stages attached once.
        """
        registered = register_bootstrap(self.registry, self.config, self.filters)
        if self._installed:
            return registered
        self._installed = True
        # Run after every other print-order filter
        self.filters.add(PRINT_SCRIPTS, self.filter_print_scripts, sys.maxsize)
        self.filters.add(SCRIPT_TAG, self.update_script_type)
        self.filters.add(INLINE_SCRIPT_ATTRIBUTES, self.filter_inline_script_attributes)
        return registered

    def uninstall(self) -> None:
        if not self._installed:
            return
        self._installed = False
        self.filters.remove(PRINT_SCRIPTS, self.filter_print_scripts)
        self.filters.remove(SCRIPT_TAG, self.update_script_type)
        self.filters.remove(INLINE_SCRIPT_ATTRIBUTES, self.filter_inline_script_attributes)

    # -- Stages --

    def filter_print_scripts(self, handles: Iterable[str]) -> list[str]:
        """Prepend the bootstrap handle when any handle is offloaded.

        The bootstrap also moves to the head group so it runs before the
        offloaded scripts. Without an offloaded handle the list is
        returned as is.
        """
        if not isinstance(handles, list):
            handles = list(handles)
        bootstrap = self.config.handle
        if not any(self.registry.is_offloaded(h) for h in handles if h != bootstrap):
            return handles
        self.registry.set_group(bootstrap, HEAD)
        return [bootstrap, *(h for h in handles if h != bootstrap)]

    def update_script_type(self, tag: Any, handle: str, *_: Any) -> Any:
        """Mark the ``{handle}-js`` script in *tag* as ``text/partytown``."""
        if not isinstance(tag, str) or not self.registry.is_offloaded(handle):
            return tag
        target_id = f"{handle}-js"
        processor = TagProcessor(tag)
        while processor.next_tag("script"):
            if processor.get_attribute("id") != target_id:
                continue
            if processor.get_attribute("type") == PARTYTOWN_TYPE:
                return tag
            processor.set_attribute("type", PARTYTOWN_TYPE)
            return processor.get_updated_html()
        return tag

    def filter_inline_script_attributes(self, attributes: Any) -> Any:
        """Mark inline before/after blocks of offloaded handles."""
        if not isinstance(attributes, Mapping):
            return attributes
        script_id = attributes.get("id")
        if not isinstance(script_id, str):
            return attributes
        m = _INLINE_ID.match(script_id)
        if m is None or not self.registry.is_offloaded(m.group("handle")):
            return attributes
        return {**attributes, "type": PARTYTOWN_TYPE}

    def generator_meta_tag(self) -> str:
        """``<meta name="generator">`` naming the plugin and its version."""
        content = html.escape(f"web-worker-offloading {__version__}", quote=True)
        return f'<meta name="generator" content="{content}">\n'
