"""Connection registry — the set of live push channels.

A channel is added the moment it is accepted and removed the moment it
closes, from either side. ``remove`` tolerates double close events.
Broadcasts work on a ``snapshot()`` and never hold the lock while sending.
"""

from __future__ import annotations

import threading
from typing import Any, Protocol


class PushChannel(Protocol):
    """The part of a push channel the orchestrator uses."""

    async def send(self, message: str) -> Any: ...


class ConnectionRegistry:
    """Thread-safe set of live push channels."""

    __slots__ = ("_connections", "_lock")

    def __init__(self) -> None:
        self._connections: set[PushChannel] = set()
        self._lock = threading.Lock()

    def add(self, conn: PushChannel) -> None:
        with self._lock:
            self._connections.add(conn)

    def remove(self, conn: PushChannel) -> None:
        """Forget *conn*. Removing an absent connection is a no-op."""
        with self._lock:
            self._connections.discard(conn)

    def snapshot(self) -> frozenset[PushChannel]:
        """Current membership (no lock held on return)."""
        with self._lock:
            return frozenset(self._connections)

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)

    def __contains__(self, conn: object) -> bool:
        with self._lock:
            return conn in self._connections
