"""Change ledger — decides whether an observed file actually changed.

Keeps the last-seen fingerprint per canonical path. The first observation
of a path always counts as a change so freshly-added files are picked up;
afterwards only a differing fingerprint does. Entries are never removed:
a stale entry for a deleted file is a harmless no-op.

Observations of the same path are serialized with a per-path lock held
across read, hash, and compare, so two overlapping events for one file
cannot interleave their read-modify-write. Different paths proceed
independently.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, TypeAlias

from prowl._errors import ReadError
from prowl._types import Classification, FileKind, Fingerprint
from prowl.content.hasher import fingerprint
from prowl.content.kinds import file_kind

if TYPE_CHECKING:
    from prowl.observability.collector import StackCollector

Reader: TypeAlias = Callable[[Path], Awaitable[bytes]]


async def read_source(path: Path) -> bytes:
    """Read a file's bytes off the event loop."""
    return await asyncio.to_thread(path.read_bytes)


def canonical(path: Path | str) -> Path:
    """Absolute, normalized form of *path* used as the ledger key."""
    return Path(os.path.abspath(path))


@dataclass(frozen=True, slots=True)
class Observation:
    """Result of observing one file.

    Attributes:
        path: Canonical path of the observed file.
        kind: FileKind used for normalization.
        fingerprint: Fingerprint of the normalized content.
        classification: ``first_seen``, ``changed`` or ``unchanged``.

    """

    path: Path
    kind: FileKind
    fingerprint: Fingerprint
    classification: Classification

    @property
    def changed(self) -> bool:
        """True for first_seen and changed observations."""
        return self.classification != "unchanged"


class ChangeLedger:
    """Per-path fingerprint store with change classification.

    Args:
        reader: Async file read service. Must raise ``OSError`` when the
            path is gone or unreadable.
        collector: Optional observability collector.

    """

    def __init__(
        self,
        reader: Reader = read_source,
        collector: StackCollector | None = None,
    ) -> None:
        self._reader = reader
        self._collector = collector
        self._hashes: dict[Path, Fingerprint] = {}
        self._locks: dict[Path, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._hashes)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return canonical(path) in self._hashes

    def get(self, path: Path | str) -> Fingerprint | None:
        """Return the stored fingerprint for *path*, if any."""
        return self._hashes.get(canonical(path))

    def record(self, path: Path | str, new: Fingerprint) -> Classification:
        """Store *new* for *path* and classify the observation.

        The stored value is only written when absent or different.

        """
        key = canonical(path)
        old = self._hashes.get(key)
        if old is None:
            self._hashes[key] = new
            return "first_seen"
        if old != new:
            self._hashes[key] = new
            return "changed"
        return "unchanged"

    async def observe(self, path: Path | str, kind: FileKind | None = None) -> Observation:
        """Read, fingerprint, and classify *path*.

        Raises:
            ReadError: The file could not be read. The ledger is untouched.

        """
        key = canonical(path)
        kind = kind if kind is not None else file_kind(key)

        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()

        async with lock:
            try:
                content = await self._reader(key)
            except OSError as exc:
                if self._collector is not None:
                    self._collector.record_read_failure(str(key), error=str(exc))
                raise ReadError(key, exc) from exc

            digest = fingerprint(content, kind)
            classification = self.record(key, digest)

        if self._collector is not None:
            self._collector.record_observation(
                str(key), kind=kind, classification=classification, fingerprint=digest,
            )
        return Observation(
            path=key, kind=kind, fingerprint=digest, classification=classification,
        )
