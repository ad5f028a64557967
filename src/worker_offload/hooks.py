"""Named filter chains — explicit composition instead of global hooks.

A ``Filters`` table is owned by whoever builds the render pipeline and
is passed to the pieces that need it. Nothing subscribes at import time.

Usage::

    filters = Filters()
    filters.add("configuration", lambda cfg: {**cfg, "forward": ["dataLayer.push"]})
    config = filters.apply("configuration", {"lib": "/static/partytown/"})
"""

from collections.abc import Callable
from dataclasses import dataclass
from itertools import count
from typing import Any

from worker_offload.errors import ConfigurationError

CONFIGURATION = "configuration"
PRINT_SCRIPTS = "print_scripts"
SCRIPT_TAG = "script_tag"
INLINE_SCRIPT_ATTRIBUTES = "inline_script_attributes"

DEFAULT_PRIORITY = 10


@dataclass(frozen=True, slots=True)
class _Entry:
    priority: int
    seq: int
    callback: Callable[..., Any]


class Filters:
    """Table of named filter chains.

    Callbacks run in ascending priority; equal priorities keep the order
    they were added in. Each callback receives the current value plus any
    extra positional arguments given to ``apply()`` and returns the new
    value.
    """

    __slots__ = ("_chains", "_seq")

    def __init__(self) -> None:
        self._chains: dict[str, list[_Entry]] = {}
        self._seq = count()

    def add(
        self,
        name: str,
        callback: Callable[..., Any],
        priority: int = DEFAULT_PRIORITY,
    ) -> None:
        """Append *callback* to the chain called *name*."""
        if not isinstance(name, str) or not name:
            msg = f"Filter name must be a non-empty string, got {name!r}"
            raise ConfigurationError(msg)
        if not callable(callback):
            msg = f"Filter {name!r} callback is not callable: {callback!r}"
            raise ConfigurationError(msg)
        chain = self._chains.setdefault(name, [])
        chain.append(_Entry(priority, next(self._seq), callback))
        chain.sort(key=lambda e: (e.priority, e.seq))

    def remove(self, name: str, callback: Callable[..., Any]) -> bool:
        """Remove the first registration of *callback* from *name*.

        Returns ``False`` when it was not registered.
        """
        chain = self._chains.get(name)
        if not chain:
            return False
        for i, entry in enumerate(chain):
            if entry.callback == callback:
                del chain[i]
                if not chain:
                    del self._chains[name]
                return True
        return False

    def has(self, name: str) -> bool:
        return bool(self._chains.get(name))

    def apply(self, name: str, value: Any, *args: Any) -> Any:
        """Thread *value* through every callback registered for *name*."""
        for entry in tuple(self._chains.get(name, ())):
            value = entry.callback(value, *args)
        return value
