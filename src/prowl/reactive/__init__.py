"""Reactive layer — coalesced reload broadcasts, live connections, entry point."""

from prowl.reactive.broadcaster import ReloadBroadcaster
from prowl.reactive.connections import ConnectionRegistry
from prowl.reactive.debounce import Debouncer
from prowl.reactive.entry import EntryPointCell, EntryPointResolver
from prowl.reactive.hmr import RELOAD, RELOAD_MAIN, RELOAD_SIGNALS

__all__ = [
    "RELOAD",
    "RELOAD_MAIN",
    "RELOAD_SIGNALS",
    "ConnectionRegistry",
    "Debouncer",
    "EntryPointCell",
    "EntryPointResolver",
    "ReloadBroadcaster",
]
