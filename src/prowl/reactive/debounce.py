"""Coalescing primitive — trailing-edge debounce on the event loop.

A ``Debouncer`` is either idle or pending with a deadline. Each
``trigger()`` (re)arms the deadline ``delay`` seconds from now; when the
deadline passes without another trigger the action runs once. The action
is payload-agnostic, so the same primitive can coalesce anything.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Awaitable, Callable
from typing import Literal


class Debouncer:
    """Run *action* once after *delay* seconds of quiet.

    Must be triggered from within a running event loop. Not thread-safe;
    call from the loop thread only.

    Args:
        action: Coroutine function to run when the window elapses.
        delay: Quiescence window in seconds.

    """

    __slots__ = ("_action", "_deadline", "_delay", "_fired", "_handle", "_tasks")

    def __init__(self, action: Callable[[], Awaitable[None]], delay: float) -> None:
        self._action = action
        self._delay = delay
        self._handle: asyncio.TimerHandle | None = None
        self._deadline: float | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._fired = 0

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def state(self) -> Literal["idle", "pending"]:
        return "idle" if self._handle is None else "pending"

    @property
    def deadline(self) -> float | None:
        """Loop time at which the pending action fires, or None when idle."""
        return self._deadline

    @property
    def fire_count(self) -> int:
        """How many times the action has been started."""
        return self._fired

    def trigger(self) -> None:
        """Arm (or re-arm) the window. Cheap and non-blocking."""
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._deadline = loop.time() + self._delay
        self._handle = loop.call_at(self._deadline, self._fire)

    def cancel(self) -> None:
        """Drop a pending action without running it."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._deadline = None

    async def drain(self) -> None:
        """Wait for already-started actions to finish."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def _fire(self) -> None:
        self._handle = None
        self._deadline = None
        self._fired += 1
        task = asyncio.ensure_future(self._action())
        self._tasks.add(task)
        task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            print(f"  Debounced action failed: {exc}", file=sys.stderr)
