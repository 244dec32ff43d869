"""Prowl — a content-aware live-reload dev server.

Watches a source directory, ignores edits that only touch comments or
whitespace, and tells connected browsers to reload when something
meaningful changed. Plugins hook into file changes and server start, and
may decide which file is the application's entry point.

Quick start::

    import prowl

    prowl.dev("my-project/")

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0"
__all__ = [
    "Orchestrator",
    "Plugin",
    "ProwlConfig",
    "__version__",
    "dev",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import prowl`` fast (no watchfiles / websockets import).
    """
    if name == "ProwlConfig":
        from prowl.config import ProwlConfig

        return ProwlConfig

    if name == "Plugin":
        from prowl.plugins.base import Plugin

        return Plugin

    if name == "Orchestrator":
        from prowl.app import Orchestrator

        return Orchestrator

    if name == "dev":
        from prowl.app import dev

        return dev

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
