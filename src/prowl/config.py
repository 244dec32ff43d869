"""Prowl configuration.

ProwlConfig is the central configuration object, frozen after creation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prowl.plugins.base import Plugin


@dataclass(frozen=True, slots=True)
class ProwlConfig:
    """Configuration for a Prowl dev server.

    Attributes:
        root: Project root directory. Always resolved to an absolute path
              on construction.
        src_dir: Watched source directory, relative to root.
        out_dir: Build output directory, relative to root (served under
            ``/dist/``).
        host: Bind address.
        port: Bind port.
        entry_point: Explicit entry identifier (``"index"`` or
            ``"index.jsx"``). ``None`` falls back to ``App.<ext>``.
        typescript: Prefer the typed variant when asking plugins for a
            default extension.
        plugins: Ordered plugin instances. Order is dispatch order.
        debounce_ms: Quiescence window for coalescing reload broadcasts.
        index_document: HTML document served at ``/``.
        hmr_path: URL path of the push channel.

    """

    root: Path = field(default_factory=Path.cwd)
    src_dir: str = "frontend"
    out_dir: str = "dist"
    host: str = "127.0.0.1"
    port: int = 3000
    entry_point: str | None = None
    typescript: bool = False
    plugins: tuple[Plugin, ...] = ()
    debounce_ms: int = 50
    index_document: str = "main.html"
    hmr_path: str = "/hmr"

    def __post_init__(self) -> None:
        # watchfiles reports absolute paths; keep root comparable.
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())
        if not isinstance(self.plugins, tuple):
            object.__setattr__(self, "plugins", tuple(self.plugins))

    @property
    def watched_path(self) -> Path:
        """Absolute path to the watched source directory."""
        src = Path(self.src_dir)
        return src if src.is_absolute() else self.root / src

    @property
    def output_path(self) -> Path:
        """Absolute path to the build output directory."""
        out = Path(self.out_dir)
        return out if out.is_absolute() else self.root / out

    @property
    def debounce_seconds(self) -> float:
        """Debounce window in seconds."""
        return self.debounce_ms / 1000
