"""Plugin interface.

A plugin is any object exposing some subset of these optional hooks. A
missing hook is skipped, never an error::

    def configure(self, config: ProwlConfig) -> None
        Called once with the resolved config, before any start hook.

    async def on_file_change(self, path: Path, kind: FileKind) -> None
        Called for every successfully read change event, in plugin order.

    async def on_server_start(self) -> None
        Called once during bootstrap, before the server accepts traffic.

    def default_extension(self, typescript: bool) -> str
        Extension (without dot) appended to an extension-less entry point.

    async def determine_entry_file(self) -> str | None
        Called right after this plugin's start hook. The first non-None
        answer across all plugins becomes the entry point.

Subclassing ``Plugin`` is optional; it only documents the hooks and
declares each as absent until a subclass defines it. ``on_file_change``,
``on_server_start`` and ``determine_entry_file`` may also be plain
functions; their result is awaited only when awaitable.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

HOOK_NAMES: tuple[str, ...] = (
    "configure",
    "on_file_change",
    "on_server_start",
    "default_extension",
    "determine_entry_file",
)


class Plugin:
    """Base class for plugins. Every hook is None unless a subclass defines it."""

    name: str = ""

    configure: Callable[..., Any] | None = None
    on_file_change: Callable[..., Any] | None = None
    on_server_start: Callable[..., Any] | None = None
    default_extension: Callable[[bool], str] | None = None
    determine_entry_file: Callable[..., Any] | None = None


def plugin_name(plugin: object) -> str:
    """Display name for *plugin*: its ``name`` attribute or class name."""
    name = getattr(plugin, "name", None)
    if isinstance(name, str) and name:
        return name
    return type(plugin).__name__


def get_hook(plugin: object, hook: str) -> Callable[..., Any] | None:
    """Return the bound hook callable, or None when the plugin lacks it."""
    fn = getattr(plugin, hook, None)
    return fn if callable(fn) else None
