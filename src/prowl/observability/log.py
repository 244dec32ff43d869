"""Event log — queryable, thread-safe event store.

Stores a bounded ring buffer of ``StackEvent`` objects for inspection.
Supports querying by event type, time range, and path.

Thread Safety:
    All methods are protected by a ``threading.Lock``.

"""

import threading
from collections import deque
from typing import Any

from prowl.observability.events import StackEvent


class EventLog:
    """Bounded event store with query support.

    When the buffer is full, the oldest events are discarded.

    Args:
        max_events: Maximum number of events to retain.

    """

    __slots__ = ("_events", "_lock", "_max_events")

    def __init__(self, max_events: int = 10_000) -> None:
        self._max_events = max_events
        self._events: deque[StackEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: StackEvent) -> None:
        """Record an event in the log."""
        with self._lock:
            self._events.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        since_ns: int = 0,
        path: str | None = None,
        limit: int = 100,
    ) -> list[StackEvent]:
        """Query events with optional filters, most recent first.

        ``path`` is a substring match against the event's ``path`` or any
        of its ``trigger_paths``.

        """
        with self._lock:
            events = list(self._events)

        results: list[StackEvent] = []
        for event in reversed(events):
            if len(results) >= limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if since_ns and event.timestamp_ns < since_ns:
                continue
            if path is not None and not _matches_path(event, path):
                continue
            results.append(event)
        return results

    def recent(self, n: int = 20) -> list[StackEvent]:
        """Return the N most recent events, oldest first."""
        with self._lock:
            items = list(self._events)
        return items[-n:]

    def clear(self) -> int:
        """Clear all events and return the count that was cleared."""
        with self._lock:
            count = len(self._events)
            self._events.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        """Return summary statistics about stored events."""
        with self._lock:
            events = list(self._events)

        type_counts: dict[str, int] = {}
        for event in events:
            name = type(event).__name__
            type_counts[name] = type_counts.get(name, 0) + 1

        return {
            "total": len(events),
            "max_events": self._max_events,
            "by_type": type_counts,
        }


def _matches_path(event: StackEvent, needle: str) -> bool:
    own = getattr(event, "path", "") or ""
    if needle in own:
        return True
    return any(needle in p for p in getattr(event, "trigger_paths", ()))
