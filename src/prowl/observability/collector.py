"""Stack collector — one place for every component to record events.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from collections.abc import Iterable

from prowl.observability.events import (
    FileObserved,
    HookFailed,
    PhaseEntered,
    ReadFailed,
    ReloadBroadcast,
    now_ns,
)
from prowl.observability.log import EventLog


class StackCollector:
    """Event collector shared by the ledger, plugins, broadcaster, and sequencer.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Content -----

    def record_observation(
        self,
        path: str,
        *,
        kind: str,
        classification: str,
        fingerprint: str,
    ) -> None:
        """Record a ledger classification."""
        self._log.append(
            FileObserved(
                path=path,
                kind=kind,
                classification=classification,
                fingerprint=fingerprint,
                timestamp_ns=now_ns(),
            )
        )

    def record_read_failure(self, path: str, *, error: str) -> None:
        """Record a dropped event for an unreadable file."""
        self._log.append(ReadFailed(path=path, error=error, timestamp_ns=now_ns()))

    # ----- Plugins -----

    def record_hook_failure(
        self,
        plugin: str,
        hook: str,
        *,
        path: str = "",
        error: str = "",
    ) -> None:
        """Record a failed plugin hook."""
        self._log.append(
            HookFailed(plugin=plugin, hook=hook, path=path, error=error, timestamp_ns=now_ns())
        )

    # ----- Reactive -----

    def record_broadcast(
        self,
        signal: str,
        *,
        clients_notified: int = 0,
        clients_dropped: int = 0,
        trigger_paths: Iterable[str] = (),
    ) -> None:
        """Record a reload broadcast."""
        self._log.append(
            ReloadBroadcast(
                signal=signal,
                clients_notified=clients_notified,
                clients_dropped=clients_dropped,
                trigger_paths=tuple(sorted(trigger_paths)),
                timestamp_ns=now_ns(),
            )
        )

    def record_phase(self, phase: str, *, duration_ms: float = 0.0) -> None:
        """Record a bootstrap phase transition."""
        self._log.append(PhaseEntered(phase=phase, duration_ms=duration_ms, timestamp_ns=now_ns()))
