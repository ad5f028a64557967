"""worker_offload exception hierarchy.

Only setup-time misuse raises. Render-time stages degrade to
"offloading not applied" and log instead.
"""


class OffloadError(Exception):
    """Base for all worker_offload errors."""


class ConfigurationError(OffloadError):
    """Raised when a value handed to the library at setup time is invalid.

    For example a filter registered under a non-string name, or a
    callback that is not callable.
    """


class RegistryError(OffloadError):
    """Raised by ``ScriptRegistry`` for misuse that cannot be degraded."""
