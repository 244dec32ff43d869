"""Prowl orchestrator — bootstrap sequencing and the change pipeline.

Startup is a strict state machine with no backward transitions::

    idle -> hashes_populated -> hooks_run -> entry_resolved -> serving

1. Prime the ledger with every existing source file (no broadcast, this
   is the baseline, not a change).
2. Hand config to plugins and run their start hooks; a plugin may
   resolve the entry point here.
3. Resolve the entry point once.
4. Bind the live server, then subscribe to file-watch events.

Serving before priming would make the first edit to any file look like a
change; serving before hooks could hand a client an entry file the
plugins have not produced yet.

Each change event is processed in its own task: read + fingerprint +
classify (serialized per path by the ledger), run plugin file hooks in
order, then schedule a debounced reload on a meaningful change. A
transform run by a hook has finished before any client is told to reload.
"""

from __future__ import annotations

import asyncio
import sys
import time
from collections.abc import AsyncIterator
from pathlib import Path
from typing import TYPE_CHECKING

from prowl._errors import BootstrapError, ReadError
from prowl._types import Phase
from prowl.config_loader import load_config
from prowl.content.kinds import is_hidden
from prowl.content.ledger import ChangeLedger, Observation, Reader, read_source
from prowl.content.watcher import ChangeEvent, SourceWatcher
from prowl.observability import StackCollector
from prowl.plugins.registry import PluginRegistry
from prowl.reactive.broadcaster import ReloadBroadcaster
from prowl.reactive.connections import ConnectionRegistry
from prowl.reactive.entry import EntryPointCell, EntryPointResolver
from prowl.server import LiveServer

if TYPE_CHECKING:
    from prowl.config import ProwlConfig

PHASES: tuple[Phase, ...] = (
    "idle",
    "hashes_populated",
    "hooks_run",
    "entry_resolved",
    "serving",
)


def discover_sources(root: Path) -> list[Path]:
    """All non-hidden files below *root*, sorted."""
    return sorted(
        p for p in root.rglob("*") if p.is_file() and not is_hidden(p, root)
    )


class Orchestrator:
    """Wires ledger, plugins, broadcaster, and server for one dev session.

    Args:
        config: Resolved ProwlConfig.
        reader: File read service used by the ledger.
        collector: Observability collector (a fresh one when omitted).
        server: Live server; built from config when omitted.

    """

    def __init__(
        self,
        config: ProwlConfig,
        *,
        reader: Reader = read_source,
        collector: StackCollector | None = None,
        server: LiveServer | None = None,
    ) -> None:
        self.config = config
        self.collector = collector if collector is not None else StackCollector()
        self.ledger = ChangeLedger(reader, self.collector)
        self.plugins = PluginRegistry(config.plugins, self.collector)
        self.connections = ConnectionRegistry()
        self.broadcaster = ReloadBroadcaster(
            self.connections,
            debounce=config.debounce_seconds,
            index_path=config.watched_path / config.index_document,
            collector=self.collector,
        )
        self.entry_cell = EntryPointCell()
        self.entry = EntryPointResolver(
            self.plugins,
            self.entry_cell,
            entry_point=config.entry_point,
            typescript=config.typescript,
        )
        self.server = server if server is not None else LiveServer(
            config, self.connections, lambda: self.entry.resolved,
        )
        self._phase: Phase = "idle"
        self._phase_t0 = time.perf_counter()
        self._tasks: set[asyncio.Task[Observation | None]] = set()

    @property
    def phase(self) -> Phase:
        return self._phase

    def _advance(self, phase: Phase) -> None:
        current = PHASES.index(self._phase)
        if PHASES.index(phase) != current + 1:
            msg = f"Cannot move from {self._phase!r} to {phase!r}"
            raise RuntimeError(msg)
        now = time.perf_counter()
        self.collector.record_phase(phase, duration_ms=(now - self._phase_t0) * 1000)
        self._phase = phase
        self._phase_t0 = now

    # ----- Bootstrap -----

    async def prime(self) -> int:
        """Record a baseline fingerprint for every existing source file.

        Returns:
            Number of files primed.

        Raises:
            BootstrapError: The watched directory does not exist.

        """
        root = self.config.watched_path
        if not root.is_dir():
            msg = f"Watched directory does not exist: {root}"
            raise BootstrapError(msg)

        files = await asyncio.to_thread(discover_sources, root)
        results = await asyncio.gather(*(self._prime_one(p) for p in files))
        self._advance("hashes_populated")
        return sum(results)

    async def _prime_one(self, path: Path) -> bool:
        try:
            await self.ledger.observe(path)
        except ReadError as exc:
            print(f"  {exc}", file=sys.stderr)
            return False
        return True

    async def run_hooks(self) -> None:
        """Configure plugins and run their start hooks in order."""
        self.plugins.configure(self.config)
        await self.plugins.dispatch_server_start(self.entry_cell)
        self._advance("hooks_run")

    def resolve_entry(self) -> str:
        entry = self.entry.resolve()
        self._advance("entry_resolved")
        return entry

    async def start_serving(self) -> None:
        """Bind the server. Raises BootstrapError if the port is unavailable."""
        await self.server.start()
        self._advance("serving")

    async def bootstrap(self) -> int:
        """Run every startup phase in order. Returns the number of primed files."""
        primed = await self.prime()
        await self.run_hooks()
        self.resolve_entry()
        await self.start_serving()
        return primed

    # ----- Change pipeline -----

    async def handle_change(self, event: ChangeEvent) -> Observation | None:
        """Process one change event.

        Returns the ledger observation, or None when the event was a
        deletion or the file could not be read.

        """
        if self._phase != "serving":
            msg = f"Change events are not accepted while {self._phase!r}"
            raise RuntimeError(msg)
        if event.kind == "deleted" or event.path.is_dir():
            return None

        try:
            observation = await self.ledger.observe(event.path, event.file_kind)
        except ReadError as exc:
            print(f"  {exc}", file=sys.stderr)
            return None

        name = event.path.name
        if observation.changed:
            print(f"  File {name} has meaningful changes", file=sys.stderr)
        else:
            print(f"  File {name} has no meaningful changes", file=sys.stderr)

        # The reload is scheduled only after every file hook has returned.
        await self.plugins.dispatch_file_change(observation.path, observation.kind)
        if observation.changed:
            self.broadcaster.notify_change(observation.path)
        return observation

    def submit(self, event: ChangeEvent) -> asyncio.Task[Observation | None]:
        """Process *event* in its own task, independent of other events."""
        task = asyncio.create_task(self.handle_change(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def consume(self, events: AsyncIterator[ChangeEvent]) -> None:
        """Submit every event from *events* until the source ends."""
        async for event in events:
            self.submit(event)

    async def settle(self) -> None:
        """Wait for in-flight events and the broadcasts they scheduled."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        await self.broadcaster.drain()

    async def shutdown(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self.broadcaster.cancel()
        await self.server.close()

    async def run(self, watcher: SourceWatcher | None = None) -> None:
        """Bootstrap, print the banner, and react to changes until cancelled."""
        from prowl.banner import print_banner

        t0 = time.perf_counter()
        primed = await self.bootstrap()
        print_banner(
            self.config,
            file_count=primed,
            entry=self.entry.resolve(),
            plugins=self.plugins.names(),
            port=self.server.port,
            load_ms=(time.perf_counter() - t0) * 1000,
        )

        watcher = watcher if watcher is not None else SourceWatcher(self.config)
        try:
            await self.consume(watcher.changes())
        finally:
            watcher.stop()
            await self.shutdown()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def dev(root: str | Path = ".", **kwargs: object) -> None:
    """Start the live-reload development server.

    Args:
        root: Project root directory.
        **kwargs: Override ProwlConfig fields.

    Exits with status 1 when bootstrap fails (e.g. the port is taken).

    """
    config = load_config(Path(root), **kwargs)
    orchestrator = Orchestrator(config)
    try:
        asyncio.run(orchestrator.run())
    except BootstrapError as exc:
        print(f"  Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("  Stopped.", file=sys.stderr)
