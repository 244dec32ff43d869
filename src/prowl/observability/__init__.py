"""Observability — structured events from every orchestrator component.

Quick Start:
    >>> from prowl.observability import StackCollector, EventLog
    >>> log = EventLog()
    >>> collector = StackCollector(log)
    >>> # pass collector to ChangeLedger, PluginRegistry, ReloadBroadcaster

"""

from prowl.observability.collector import StackCollector
from prowl.observability.events import (
    FileObserved,
    HookFailed,
    PhaseEntered,
    ReadFailed,
    ReloadBroadcast,
    StackEvent,
    now_ns,
)
from prowl.observability.log import EventLog

__all__ = [
    "EventLog",
    "FileObserved",
    "HookFailed",
    "PhaseEntered",
    "ReadFailed",
    "ReloadBroadcast",
    "StackCollector",
    "StackEvent",
    "now_ns",
]
