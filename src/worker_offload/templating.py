"""Kida template globals for printing scripts.

Usage::

    env = Environment(autoescape=True)
    register_globals(env, printer, offloading)

    <head>
      ...
      {{ worker_offload_head() }}
    </head>
    <body>
      ...
      {{ worker_offload_footer() }}
    </body>
"""

from kida import Environment
from kida.utils.html import Markup

from worker_offload.offload import WorkerOffloading
from worker_offload.printer import ScriptPrinter


def register_globals(
    env: Environment,
    printer: ScriptPrinter,
    offloading: WorkerOffloading | None = None,
) -> None:
    """Add ``worker_offload_head()`` and ``worker_offload_footer()`` to *env*.

    When *offloading* is given and its config enables it, the head output
    starts with the generator meta tag.
    """

    def worker_offload_head() -> Markup:
        meta = ""
        if offloading is not None and offloading.config.generator:
            meta = offloading.generator_meta_tag()
        return Markup(meta + printer.print_head())

    def worker_offload_footer() -> Markup:
        return Markup(printer.print_footer())

    env.add_global("worker_offload_head", worker_offload_head)
    env.add_global("worker_offload_footer", worker_offload_footer)
