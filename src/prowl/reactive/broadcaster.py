"""Reload broadcaster — pushes a reload signal to every live browser.

``notify_change()`` may be called for every meaningful change; calls that
arrive within the debounce window collapse into a single broadcast, which
absorbs editor save chains (temp write + rename) and multi-file saves.

On firing, the frame goes to a snapshot of the connection registry taken
at that moment. A connection that closed before the snapshot simply gets
nothing; one whose send fails is treated as closed and removed.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from websockets.exceptions import ConnectionClosed

from prowl._errors import TransportError
from prowl._types import ReloadSignal
from prowl.content.ledger import canonical
from prowl.reactive.debounce import Debouncer
from prowl.reactive.hmr import RELOAD, RELOAD_MAIN

if TYPE_CHECKING:
    from prowl.observability.collector import StackCollector
    from prowl.reactive.connections import ConnectionRegistry, PushChannel

# Default quiescence window, in seconds
DEFAULT_DEBOUNCE = 0.05


class ReloadBroadcaster:
    """Debounced reload fan-out over a ConnectionRegistry.

    Args:
        connections: Registry of live push channels.
        debounce: Quiescence window in seconds.
        index_path: Path of the primary document; a burst that touched
            it is announced as ``reload-main``.
        collector: Optional observability collector.

    """

    def __init__(
        self,
        connections: ConnectionRegistry,
        *,
        debounce: float = DEFAULT_DEBOUNCE,
        index_path: Path | None = None,
        collector: StackCollector | None = None,
    ) -> None:
        self._connections = connections
        self._index_path = canonical(index_path) if index_path is not None else None
        self._collector = collector
        self._pending: set[Path] = set()
        self._debouncer = Debouncer(self._fire, debounce)
        self._broadcasts = 0

    @property
    def broadcast_count(self) -> int:
        """Number of broadcasts sent so far."""
        return self._broadcasts

    @property
    def is_pending(self) -> bool:
        return self._debouncer.state == "pending"

    def notify_change(self, path: Path | None = None) -> None:
        """Schedule a reload, coalescing with any pending one."""
        if path is not None:
            self._pending.add(path)
        self._debouncer.trigger()

    def cancel(self) -> None:
        """Discard a pending broadcast."""
        self._debouncer.cancel()
        self._pending.clear()

    async def drain(self) -> None:
        """Wait for in-flight broadcasts to complete."""
        await self._debouncer.drain()

    def signal_for(self, paths: Iterable[Path]) -> ReloadSignal:
        """``reload-main`` if any of *paths* is the index document."""
        if self._index_path is not None and any(canonical(p) == self._index_path for p in paths):
            return RELOAD_MAIN
        return RELOAD

    async def _fire(self) -> None:
        paths, self._pending = self._pending, set()
        await self.broadcast(self.signal_for(paths), trigger_paths=paths)

    async def broadcast(
        self,
        signal: ReloadSignal = RELOAD,
        *,
        trigger_paths: Iterable[Path] = (),
    ) -> int:
        """Send *signal* to every current connection immediately.

        Returns:
            Number of connections the frame was delivered to.

        """
        snapshot = self._connections.snapshot()
        print("  Reloading clients.", file=sys.stderr)
        results = await asyncio.gather(
            *(self._send(conn, signal) for conn in snapshot),
        )
        delivered = sum(results)
        dropped = len(results) - delivered
        self._broadcasts += 1

        if self._collector is not None:
            self._collector.record_broadcast(
                signal,
                clients_notified=delivered,
                clients_dropped=dropped,
                trigger_paths=(str(p) for p in trigger_paths),
            )
        return delivered

    async def _send(self, conn: PushChannel, signal: str) -> bool:
        try:
            await conn.send(signal)
        except (ConnectionClosed, TransportError, OSError):
            self._connections.remove(conn)
            return False
        except Exception as exc:
            print(f"  Dropping client after failed send: {exc}", file=sys.stderr)
            self._connections.remove(conn)
            return False
        return True
