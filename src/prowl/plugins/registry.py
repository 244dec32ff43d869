"""Plugin hook registry — ordered, sequential, failure-isolated dispatch.

Plugins are held in the order they were configured. For any one event,
hooks run one after another in that order and each is awaited before the
next starts, so a later plugin can rely on an earlier plugin's output
(e.g. a packaging step reading what a transpile step just wrote).

A hook that raises is reported (stderr and the collector) and dispatch
moves on to the next plugin.
"""

from __future__ import annotations

import inspect
import sys
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from prowl._errors import HookError
from prowl._types import FileKind
from prowl.plugins.base import Plugin, get_hook, plugin_name

if TYPE_CHECKING:
    from prowl.config import ProwlConfig
    from prowl.observability.collector import StackCollector
    from prowl.reactive.entry import EntryPointCell


async def _call(fn: Any, *args: Any) -> Any:
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class PluginRegistry:
    """Fixed, ordered list of plugins with hook dispatch.

    Args:
        plugins: Plugins in dispatch order.
        collector: Optional observability collector.

    """

    def __init__(
        self,
        plugins: Sequence[Plugin] = (),
        collector: StackCollector | None = None,
    ) -> None:
        self._plugins: tuple[Plugin, ...] = tuple(plugins)
        self._collector = collector

    @property
    def plugins(self) -> tuple[Plugin, ...]:
        return self._plugins

    def __len__(self) -> int:
        return len(self._plugins)

    def __iter__(self) -> Iterator[Plugin]:
        return iter(self._plugins)

    def names(self) -> tuple[str, ...]:
        """Display names of all plugins, in order."""
        return tuple(plugin_name(p) for p in self._plugins)

    def configure(self, config: ProwlConfig) -> tuple[HookError, ...]:
        """Hand the resolved config to every plugin exposing ``configure``."""
        failures: list[HookError] = []
        for plugin in self._plugins:
            hook = get_hook(plugin, "configure")
            if hook is None:
                continue
            try:
                hook(config)
            except Exception as exc:
                failures.append(self._report(plugin, "configure", exc))
        return tuple(failures)

    async def dispatch_file_change(self, path: Path, kind: FileKind) -> tuple[HookError, ...]:
        """Run every ``on_file_change`` hook for *path*, in order.

        Returns:
            The failures that were reported, in dispatch order.

        """
        failures: list[HookError] = []
        for plugin in self._plugins:
            hook = get_hook(plugin, "on_file_change")
            if hook is None:
                continue
            try:
                await _call(hook, path, kind)
            except Exception as exc:
                failures.append(self._report(plugin, "on_file_change", exc, path))
        return tuple(failures)

    async def dispatch_server_start(self, entry: EntryPointCell) -> tuple[HookError, ...]:
        """Run start hooks in order, resolving the entry point along the way.

        For each plugin: ``on_server_start`` first, then, if the entry
        point is still unresolved, ``determine_entry_file``. The first
        non-None answer is written to *entry*; later plugins still get
        their start hook but are not asked for an entry file.

        """
        failures: list[HookError] = []
        for plugin in self._plugins:
            start = get_hook(plugin, "on_server_start")
            if start is not None:
                try:
                    await _call(start)
                except Exception as exc:
                    failures.append(self._report(plugin, "on_server_start", exc))

            if entry.is_set:
                continue
            resolver = get_hook(plugin, "determine_entry_file")
            if resolver is None:
                continue
            try:
                found = await _call(resolver)
            except Exception as exc:
                failures.append(self._report(plugin, "determine_entry_file", exc))
                continue
            if found:
                entry.set(str(found))
        return tuple(failures)

    def default_extension(self, typescript: bool) -> str | None:
        """Ask the first plugin exposing ``default_extension``.

        Returns None when no plugin has the hook or the hook fails.

        """
        for plugin in self._plugins:
            hook = get_hook(plugin, "default_extension")
            if hook is None:
                continue
            try:
                ext = hook(typescript)
            except Exception as exc:
                self._report(plugin, "default_extension", exc)
                return None
            return str(ext).lstrip(".") if ext else None
        return None

    def _report(
        self,
        plugin: Plugin,
        hook: str,
        exc: BaseException,
        path: Path | None = None,
    ) -> HookError:
        error = HookError(plugin_name(plugin), hook, exc, path)
        print(f"  Plugin error: {error}", file=sys.stderr)
        if self._collector is not None:
            self._collector.record_hook_failure(
                error.plugin, hook, path=str(path) if path is not None else "", error=str(exc),
            )
        return error
