"""Entry point resolution.

The entry point is the file the client application loads as its root
module. Resolution order, first match wins:

1. A value a plugin supplied during server-start dispatch.
2. The configured entry, verbatim if it already has an extension,
   otherwise with the resolved default extension appended.
3. ``App`` with the resolved default extension.

The default extension comes from the first plugin that exposes
``default_extension`` (given the typed-variant flag), else ``jsx``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prowl.plugins.registry import PluginRegistry

DEFAULT_EXTENSION = "jsx"
DEFAULT_BASENAME = "App"


class EntryPointCell:
    """Write-once holder for a plugin-supplied entry point."""

    __slots__ = ("_value",)

    def __init__(self) -> None:
        self._value: str | None = None

    @property
    def value(self) -> str | None:
        return self._value

    @property
    def is_set(self) -> bool:
        return self._value is not None

    def set(self, value: str) -> bool:
        """Store *value* unless already set. Returns True if it was stored."""
        if self._value is not None:
            return False
        self._value = value
        return True


def has_extension(entry: str) -> bool:
    """True when *entry* contains a dot anywhere, e.g. ``./src/main``."""
    return "." in entry


class EntryPointResolver:
    """Computes the entry point once and caches it for the process lifetime.

    Args:
        registry: Plugin registry, consulted for the default extension.
        cell: Cell filled by plugins during server-start dispatch.
        entry_point: Configured entry identifier, if any.
        typescript: Typed-variant flag passed to ``default_extension``.

    """

    def __init__(
        self,
        registry: PluginRegistry,
        cell: EntryPointCell,
        *,
        entry_point: str | None = None,
        typescript: bool = False,
    ) -> None:
        self._registry = registry
        self._cell = cell
        self._entry_point = entry_point
        self._typescript = typescript
        self._resolved: str | None = None

    @property
    def resolved(self) -> str | None:
        """The cached entry point, or None before the first ``resolve()``."""
        return self._resolved

    def resolve(self) -> str:
        if self._resolved is None:
            self._resolved = self._compute()
        return self._resolved

    def _compute(self) -> str:
        if self._cell.value is not None:
            return self._cell.value
        if self._entry_point:
            if has_extension(self._entry_point):
                return self._entry_point
            return f"{self._entry_point}.{self._extension()}"
        return f"{DEFAULT_BASENAME}.{self._extension()}"

    def _extension(self) -> str:
        return self._registry.default_extension(self._typescript) or DEFAULT_EXTENSION
