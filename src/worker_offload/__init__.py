"""worker_offload — run third-party scripts in a web worker via Partytown.

Scripts opt in per handle; at print time their tags are marked
``type="text/partytown"`` and the Partytown bootstrap is printed first.

Basic usage::

    from worker_offload import ScriptPrinter, ScriptRegistry, WorkerOffloading

    registry = ScriptRegistry()
    registry.add("gtag", "https://www.googletagmanager.com/gtag/js?id=G-1")
    registry.add_data("gtag", "worker", True)
    registry.enqueue("gtag")

    offloading = WorkerOffloading(registry)
    offloading.install()

    printer = ScriptPrinter(registry, offloading.filters)
    head = printer.print_head()

Kida templates (``worker_offload.templating``)::

    register_globals(env, printer, offloading)
    {{ worker_offload_head() }}
"""

__version__ = "0.2.1"
__all__ = [
    "ConfigurationError",
    "Filters",
    "OffloadConfig",
    "OffloadError",
    "RegistryError",
    "Script",
    "ScriptPrinter",
    "ScriptRegistry",
    "TagProcessor",
    "WorkerOffloading",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import worker_offload`` fast while providing a clean top-level API.
    """
    if name == "OffloadConfig":
        from worker_offload.config import OffloadConfig

        return OffloadConfig

    if name == "Filters":
        from worker_offload.hooks import Filters

        return Filters

    if name in ("Script", "ScriptRegistry"):
        from worker_offload import registry as _registry

        return getattr(_registry, name)

    if name == "ScriptPrinter":
        from worker_offload.printer import ScriptPrinter

        return ScriptPrinter

    if name == "TagProcessor":
        from worker_offload.html import TagProcessor

        return TagProcessor

    if name == "WorkerOffloading":
        from worker_offload.offload import WorkerOffloading

        return WorkerOffloading

    if name in ("ConfigurationError", "OffloadError", "RegistryError"):
        from worker_offload import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
