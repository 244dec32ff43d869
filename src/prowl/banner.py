"""Startup banner — status output once the orchestrator is serving.

Detects ``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prowl.config import ProwlConfig


# ---------------------------------------------------------------------------
# ANSI helpers: respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""


def _clickable_url(url: str) -> str:
    """Wrap *url* in an OSC 8 hyperlink escape if the terminal supports it."""
    if not _COLOR:
        return url
    return f"\033]8;;{url}\033\\{_BOLD}{_CYAN}{url}{_RESET}\033]8;;\033\\"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def print_banner(
    config: ProwlConfig,
    *,
    file_count: int,
    entry: str,
    plugins: Sequence[str] = (),
    port: int | None = None,
    load_ms: float = 0.0,
    warnings: list[str] | None = None,
) -> None:
    """Print the Prowl startup banner to stderr.

    Args:
        config: Resolved ProwlConfig.
        file_count: Number of source files primed.
        entry: Resolved entry point.
        plugins: Plugin display names, in dispatch order.
        port: Bound port, when it differs from ``config.port``.
        load_ms: Time spent bootstrapping in milliseconds.
        warnings: Optional list of warning messages to display.

    """
    from prowl import __version__

    lines: list[str] = [
        "",
        f"  {_BOLD}Prowl{_RESET} {_DIM}v{__version__}{_RESET}  {_GREEN}[dev]{_RESET}",
        f"  {_DIM}{'─' * 43}{_RESET}",
    ]

    files_label = "file" if file_count == 1 else "files"
    timing = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""
    lines.append(f"  {_DIM}├─{_RESET} {file_count} {files_label} hashed{timing}")
    lines.append(f"  {_DIM}├─{_RESET} watching: {_DIM}{config.watched_path}{_RESET}")
    lines.append(f"  {_DIM}├─{_RESET} output: {_DIM}{config.output_path}{_RESET}")
    lines.append(f"  {_DIM}├─{_RESET} entry: {entry}")
    if plugins:
        lines.append(f"  {_DIM}├─{_RESET} plugins: {', '.join(plugins)}")
    lines.append(
        f"  {_DIM}└─{_RESET} {_GREEN}live{_RESET} "
        f"— WebSocket on {_DIM}{config.hmr_path}{_RESET}"
    )

    url = f"http://{config.host}:{port if port is not None else config.port}"
    lines.append("")
    lines.append(f"  {_clickable_url(url)}")
    lines.append("")
    lines.append(f"  {_DIM}Watching for changes...{_RESET}")

    if warnings:
        lines.append("")
        lines.extend(f"  {_YELLOW}!{_RESET} {w}" for w in warnings)

    lines.append("")

    print("\n".join(lines), file=sys.stderr)
