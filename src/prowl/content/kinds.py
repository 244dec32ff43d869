"""File kind detection.

The kind of a watched file is decided by its extension alone and drives
both normalization rules and plugin dispatch.
"""

from __future__ import annotations

from pathlib import Path

from prowl._types import FileKind

_EXTENSION_KINDS: dict[str, FileKind] = {
    ".html": "markup",
    ".htm": "markup",
    ".js": "script",
    ".mjs": "script",
    ".cjs": "script",
    ".ts": "script",
    ".css": "style",
    ".jsx": "component",
    ".tsx": "component",
}


def file_kind(path: Path | str) -> FileKind:
    """Return the FileKind for *path* (``"unknown"`` for unrecognized extensions)."""
    return _EXTENSION_KINDS.get(Path(path).suffix.lower(), "unknown")


def is_hidden(path: Path, root: Path) -> bool:
    """True if any component of *path* below *root* starts with a dot."""
    try:
        rel = path.relative_to(root)
    except ValueError:
        rel = path
    return any(part.startswith(".") for part in rel.parts)
