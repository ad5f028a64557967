"""Script printing — turns queued handles into ``<script>`` markup.

The stages that shape the output are looked up in a ``Filters`` table
passed in by the caller:

- ``print_scripts(handles)``: the handle list about to be printed
- ``inline_script_attributes(attributes)``: attributes of each inline block
- ``script_tag(tag, handle, src)``: the full markup of a handle with a ``src``

Each handle renders as its inline ``before`` block, its own tag, then
its inline ``after`` block::

    <script id="gtag-js-before">window.dataLayer = [];</script>
    <script src="https://example.com/gtag.js?ver=1" id="gtag-js"></script>
    <script id="gtag-js-after">gtag("config", "G-1");</script>

Handles print at most once per printer: the bootstrap prints in the head
and is skipped if a footer pass meets it again.
"""

import html
from collections.abc import Mapping
from typing import Any

from worker_offload.hooks import INLINE_SCRIPT_ATTRIBUTES, PRINT_SCRIPTS, SCRIPT_TAG, Filters
from worker_offload.registry import FOOTER, HEAD, Script, ScriptRegistry


def render_attributes(attributes: Mapping[str, Any]) -> str:
    """Render an attribute mapping. ``True`` is bare, ``False``/``None`` omitted."""
    parts = []
    for name, value in attributes.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{html.escape(str(value), quote=True)}"')
    return "".join(parts)


def versioned_src(src: str, version: str | None) -> str:
    if not version:
        return src
    sep = "&" if "?" in src else "?"
    return f"{src}{sep}ver={version}"


class ScriptPrinter:
    """Prints a registry's queued scripts group by group."""

    __slots__ = ("filters", "registry")

    def __init__(self, registry: ScriptRegistry, filters: Filters | None = None) -> None:
        self.registry = registry
        self.filters = filters if filters is not None else Filters()

    def print_head(self) -> str:
        return self.print_scripts(HEAD)

    def print_footer(self) -> str:
        return self.print_scripts(FOOTER)

    def print_scripts(self, group: int) -> str:
        """Render every pending handle that belongs to *group*."""
        registry = self.registry
        pending = [h for h in registry.queue if h not in registry.done]
        handles = self.filters.apply(PRINT_SCRIPTS, pending)

        out: list[str] = []
        for handle in handles:
            if handle in registry.done:
                continue
            script = registry.get(handle)
            if script is None or script.group != group:
                continue
            out.append(self.render(script))
            registry.done.add(handle)
        return "".join(out)

    def render(self, script: Script) -> str:
        """Markup for one handle, run through the ``script_tag`` stage."""
        before = self._inline(script, "before")
        after = self._inline(script, "after")
        if not script.src:
            return before + after

        src = versioned_src(script.src, script.version)
        attributes = {"src": src, "id": f"{script.handle}-js"}
        tag = f"<script{render_attributes(attributes)}></script>\n"
        return self.filters.apply(SCRIPT_TAG, before + tag + after, script.handle, src)

    def _inline(self, script: Script, position: str) -> str:
        payloads: list[str] = getattr(script, position)
        if not payloads:
            return ""
        attributes = self.filters.apply(
            INLINE_SCRIPT_ATTRIBUTES,
            {"id": f"{script.handle}-js-{position}"},
        )
        data = "\n".join(payloads)
        return f"<script{render_attributes(attributes)}>\n{data}\n</script>\n"
