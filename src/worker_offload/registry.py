"""In-memory script registry — the host side of the render pipeline.

Holds one ``Script`` record per handle: where it loads from, which print
group it belongs to, inline payloads, and whether it opted into worker
offloading. Registrants own the records; the offloading stages only read
the opt-in flag and move the bootstrap handle between groups.

Usage::

    registry = ScriptRegistry()
    registry.add("gtag", "https://www.googletagmanager.com/gtag/js?id=G-1")
    registry.add_data("gtag", "worker", True)
    registry.enqueue("gtag")
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Literal

from worker_offload.errors import RegistryError

logger = logging.getLogger("worker_offload.registry")

HEAD = 0
FOOTER = 1

WORKER_KEY = "worker"

type InlinePosition = Literal["before", "after"]


@dataclass(slots=True)
class Script:
    """A registered script handle.

    ``src`` is empty for handles that only carry inline payloads.
    """

    handle: str
    src: str = ""
    version: str | None = None
    group: int = HEAD
    worker: bool = False
    extra: dict[str, Any] = field(default_factory=dict)
    before: list[str] = field(default_factory=list)
    after: list[str] = field(default_factory=list)


class ScriptRegistry:
    """Script records keyed by handle, plus the print queue."""

    __slots__ = ("_scripts", "done", "queue")

    def __init__(self) -> None:
        self._scripts: dict[str, Script] = {}
        self.queue: list[str] = []
        self.done: set[str] = set()

    def __contains__(self, handle: object) -> bool:
        return handle in self._scripts

    def get(self, handle: str) -> Script | None:
        return self._scripts.get(handle)

    def add(
        self,
        handle: str,
        src: str = "",
        *,
        version: str | None = None,
        in_footer: bool = False,
    ) -> bool:
        """Register *handle*. Returns ``False`` if it is already registered."""
        if not handle:
            msg = "Script handle must be a non-empty string"
            raise RegistryError(msg)
        if handle in self._scripts:
            return False
        self._scripts[handle] = Script(
            handle=handle,
            src=src,
            version=version,
            group=FOOTER if in_footer else HEAD,
        )
        return True

    def add_inline_script(
        self,
        handle: str,
        data: str,
        position: InlinePosition = "after",
    ) -> bool:
        """Attach inline JavaScript printed before or after *handle*'s own tag."""
        if position not in ("before", "after"):
            msg = f"Inline script position must be 'before' or 'after', got {position!r}"
            raise ValueError(msg)
        script = self._scripts.get(handle)
        if script is None:
            return False
        getattr(script, position).append(data)
        return True

    def add_data(self, handle: str, key: str, value: Any) -> bool:
        """Store metadata on *handle*. ``"worker"`` sets the opt-in flag."""
        script = self._scripts.get(handle)
        if script is None:
            return False
        if key == WORKER_KEY:
            if not isinstance(value, bool):
                logger.debug("Non-boolean worker flag for %r treated as opted out", handle)
                value = False
            script.worker = value
        else:
            script.extra[key] = value
        return True

    def get_data(self, handle: str, key: str, default: Any = None) -> Any:
        script = self._scripts.get(handle)
        if script is None:
            return default
        if key == WORKER_KEY:
            return script.worker
        return script.extra.get(key, default)

    def set_worker(self, handle: str, enabled: bool = True) -> bool:
        """Opt *handle* into (or out of) worker offloading."""
        return self.add_data(handle, WORKER_KEY, enabled)

    def is_offloaded(self, handle: str) -> bool:
        """Return the worker opt-in flag for *handle*, ``False`` when unset."""
        script = self._scripts.get(handle)
        return script is not None and script.worker is True

    def set_group(self, handle: str, group: int) -> bool:
        script = self._scripts.get(handle)
        if script is None:
            return False
        script.group = group
        return True

    def enqueue(self, handle: str) -> None:
        if handle not in self.queue:
            self.queue.append(handle)
