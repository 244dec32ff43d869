"""File watcher — turns filesystem notifications into ChangeEvents.

Wraps ``watchfiles.awatch`` over the watched source directory. Hidden
files and directories (and the usual editor/VCS noise filtered by
watchfiles' ``DefaultFilter``) never produce events.

The watcher is subscribed exactly once, after bootstrap priming, and
yields events until ``stop()`` is called.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from watchfiles import Change, DefaultFilter, awatch

from prowl._types import FileKind
from prowl.content.kinds import file_kind, is_hidden

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from prowl.config import ProwlConfig


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A file change detected by the watcher.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.
        file_kind: Kind of file, used for normalization and plugin dispatch.

    """

    path: Path
    kind: Literal["created", "modified", "deleted"]
    file_kind: FileKind


# Mapping from watchfiles Change enum to our kind literals.
_CHANGE_KIND_MAP: dict[Change, Literal["created", "modified", "deleted"]] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


def to_change_event(change: Change, path: Path, root: Path) -> ChangeEvent | None:
    """Build a ChangeEvent for *path*, or None if it is outside *root* or hidden."""
    try:
        path.relative_to(root)
    except ValueError:
        return None
    if is_hidden(path, root):
        return None
    return ChangeEvent(
        path=path,
        kind=_CHANGE_KIND_MAP.get(change, "modified"),
        file_kind=file_kind(path),
    )


class SourceFilter(DefaultFilter):
    """watchfiles filter that also drops dot-files below the watched root."""

    def __init__(self, root: Path) -> None:
        super().__init__()
        self._root = root

    def __call__(self, change: Change, path: str) -> bool:
        return super().__call__(change, path) and not is_hidden(Path(path), self._root)


class SourceWatcher:
    """Watches the source directory and yields ChangeEvents.

    Args:
        config: Resolved ProwlConfig.
        debounce_ms: watchfiles grouping window. Kept short; reload
            coalescing happens downstream in the broadcaster.

    """

    def __init__(self, config: ProwlConfig, *, debounce_ms: int = 100) -> None:
        self._root = config.watched_path
        self._debounce_ms = debounce_ms
        self._stop_event = asyncio.Event()

    def stop(self) -> None:
        """Signal the watch loop to finish."""
        self._stop_event.set()

    async def changes(self) -> AsyncIterator[ChangeEvent]:
        """Async iterator that yields ChangeEvent objects as they occur."""
        async for raw_changes in awatch(
            self._root,
            watch_filter=SourceFilter(self._root),
            stop_event=self._stop_event,
            debounce=self._debounce_ms,
            step=50,
        ):
            for change_type, path_str in sorted(raw_changes, key=lambda c: c[1]):
                event = to_change_event(change_type, Path(path_str), self._root)
                if event is not None:
                    yield event
