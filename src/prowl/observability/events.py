"""Event model for orchestrator observability.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import TypeAlias


# ---------------------------------------------------------------------------
# Content events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileObserved:
    """A watched file was read, fingerprinted, and classified.

    Attributes:
        path: Canonical path of the file.
        kind: FileKind used for normalization.
        classification: ``first_seen``, ``changed`` or ``unchanged``.
        fingerprint: Hex digest of the normalized content.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    kind: str
    classification: str
    fingerprint: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ReadFailed:
    """A watched file could not be read; the event was dropped."""

    path: str
    error: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Plugin events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HookFailed:
    """A plugin hook raised during dispatch.

    Attributes:
        plugin: Plugin display name.
        hook: Hook attribute name (e.g. ``on_file_change``).
        path: File that triggered the hook, empty for start hooks.
        error: Exception text.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    plugin: str
    hook: str
    path: str
    error: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Reactive events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ReloadBroadcast:
    """A coalesced reload signal was pushed to live clients.

    Attributes:
        signal: Text frame sent (``reload`` or ``reload-main``).
        clients_notified: Connections the frame was delivered to.
        clients_dropped: Connections removed after a failed send.
        trigger_paths: Paths whose changes were coalesced into this broadcast.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    signal: str
    clients_notified: int
    clients_dropped: int
    trigger_paths: tuple[str, ...]
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class PhaseEntered:
    """The bootstrap sequencer entered a new phase."""

    phase: str
    duration_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

StackEvent: TypeAlias = FileObserved | ReadFailed | HookFailed | ReloadBroadcast | PhaseEntered


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
