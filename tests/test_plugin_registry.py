"""Tests for prowl.plugins — optional hooks and ordered dispatch."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from prowl._errors import HookError, PluginError
from prowl.config import ProwlConfig
from prowl.observability import HookFailed, StackCollector
from prowl.plugins import HOOK_NAMES, Plugin, PluginRegistry, plugin_name
from prowl.plugins.base import get_hook
from prowl.reactive.entry import EntryPointCell
from tests.conftest import RecordingPlugin


class TestPluginBase:
    def test_hooks_absent_by_default(self) -> None:
        plugin = Plugin()
        for hook in HOOK_NAMES:
            assert getattr(plugin, hook) is None
            assert get_hook(plugin, hook) is None

    def test_name_falls_back_to_class(self) -> None:
        class Sass(Plugin):
            pass

        assert plugin_name(Sass()) == "Sass"

    def test_explicit_name(self) -> None:
        class Sass(Plugin):
            name = "sass"

        assert plugin_name(Sass()) == "sass"


class TestDispatchFileChange:
    """on_file_change runs in list order, sequentially."""

    @pytest.mark.asyncio
    async def test_runs_in_order(self, journal: list[tuple[str, str]]) -> None:
        registry = PluginRegistry([
            RecordingPlugin("a", journal),
            RecordingPlugin("b", journal),
        ])

        failures = await registry.dispatch_file_change(Path("/src/App.jsx"), "component")

        assert failures == ()
        assert journal == [
            ("a", "on_file_change:App.jsx:component"),
            ("b", "on_file_change:App.jsx:component"),
        ]

    @pytest.mark.asyncio
    async def test_each_hook_awaited_before_next(self) -> None:
        order: list[str] = []

        class Slow(Plugin):
            async def on_file_change(self, path: Path, kind: str) -> None:
                order.append("slow:start")
                await asyncio.sleep(0.02)
                order.append("slow:end")

        class Fast(Plugin):
            async def on_file_change(self, path: Path, kind: str) -> None:
                order.append("fast")

        await PluginRegistry([Slow(), Fast()]).dispatch_file_change(Path("/a.js"), "script")

        assert order == ["slow:start", "slow:end", "fast"]

    @pytest.mark.asyncio
    async def test_missing_hook_is_skipped(self, journal: list[tuple[str, str]]) -> None:
        registry = PluginRegistry([Plugin(), object(), RecordingPlugin("a", journal)])
        failures = await registry.dispatch_file_change(Path("/a.css"), "style")
        assert failures == ()
        assert journal == [("a", "on_file_change:a.css:style")]

    @pytest.mark.asyncio
    async def test_failure_does_not_abort_dispatch(
        self, journal: list[tuple[str, str]], capsys: pytest.CaptureFixture[str],
    ) -> None:
        collector = StackCollector()
        registry = PluginRegistry(
            [
                RecordingPlugin("a", journal, fail_on=frozenset({"on_file_change"})),
                RecordingPlugin("b", journal),
            ],
            collector,
        )

        failures = await registry.dispatch_file_change(Path("/src/main.html"), "markup")

        assert [name for name, _ in journal] == ["a", "b"]
        assert len(failures) == 1
        error = failures[0]
        assert isinstance(error, HookError)
        assert isinstance(error, PluginError)
        assert error.plugin == "a"
        assert error.hook == "on_file_change"
        assert error.path == Path("/src/main.html")
        assert "Plugin error" in capsys.readouterr().err
        recorded = collector.log.query(event_type=HookFailed)
        assert recorded[0].plugin == "a"
        assert recorded[0].path.endswith("main.html")

    @pytest.mark.asyncio
    async def test_sync_hooks_supported(self) -> None:
        seen: list[Path] = []

        class Sync(Plugin):
            def on_file_change(self, path: Path, kind: str) -> None:
                seen.append(path)

        await PluginRegistry([Sync()]).dispatch_file_change(Path("/a.js"), "script")
        assert seen == [Path("/a.js")]


class TestDispatchServerStart:
    """Start hooks plus first-non-None entry resolution."""

    @pytest.mark.asyncio
    async def test_start_then_resolver_per_plugin(self, journal: list[tuple[str, str]]) -> None:
        registry = PluginRegistry([
            RecordingPlugin("a", journal),
            RecordingPlugin("b", journal, entry="App.tsx"),
        ])
        cell = EntryPointCell()

        await registry.dispatch_server_start(cell)

        assert journal == [
            ("a", "on_server_start"),
            ("a", "determine_entry_file"),
            ("b", "on_server_start"),
            ("b", "determine_entry_file"),
        ]
        assert cell.value == "App.tsx"

    @pytest.mark.asyncio
    async def test_first_non_null_wins(self, journal: list[tuple[str, str]]) -> None:
        registry = PluginRegistry([
            RecordingPlugin("a", journal, entry="X"),
            RecordingPlugin("b", journal, entry="Y"),
        ])
        cell = EntryPointCell()

        await registry.dispatch_server_start(cell)

        assert cell.value == "X"
        # b still starts, but is not asked for an entry file
        assert ("b", "on_server_start") in journal
        assert ("b", "determine_entry_file") not in journal

    @pytest.mark.asyncio
    async def test_start_failure_continues(self, journal: list[tuple[str, str]]) -> None:
        registry = PluginRegistry([
            RecordingPlugin("a", journal, entry="main.jsx", fail_on=frozenset({"on_server_start"})),
            RecordingPlugin("b", journal),
        ])
        cell = EntryPointCell()

        failures = await registry.dispatch_server_start(cell)

        assert [f.hook for f in failures] == ["on_server_start"]
        assert cell.value == "main.jsx"
        assert ("b", "on_server_start") in journal

    @pytest.mark.asyncio
    async def test_resolver_failure_falls_through(self, journal: list[tuple[str, str]]) -> None:
        registry = PluginRegistry([
            RecordingPlugin("a", journal, entry="A", fail_on=frozenset({"determine_entry_file"})),
            RecordingPlugin("b", journal, entry="B"),
        ])
        cell = EntryPointCell()

        failures = await registry.dispatch_server_start(cell)

        assert [f.hook for f in failures] == ["determine_entry_file"]
        assert cell.value == "B"

    @pytest.mark.asyncio
    async def test_preset_cell_is_not_overwritten(self, journal: list[tuple[str, str]]) -> None:
        cell = EntryPointCell()
        cell.set("Preset.jsx")
        await PluginRegistry([RecordingPlugin("a", journal, entry="A")]).dispatch_server_start(cell)
        assert cell.value == "Preset.jsx"


class TestDefaultExtension:
    def test_first_plugin_with_hook_wins(self, journal: list[tuple[str, str]]) -> None:
        registry = PluginRegistry([
            RecordingPlugin("plain", journal),
            RecordingPlugin("vue", journal, extension="vue"),
            RecordingPlugin("svelte", journal, extension="svelte"),
        ])
        assert registry.default_extension(False) == "vue"

    def test_typed_flag_passed_through(self) -> None:
        class Typed(Plugin):
            def default_extension(self, typescript: bool) -> str:
                return "tsx" if typescript else "jsx"

        registry = PluginRegistry([Typed()])
        assert registry.default_extension(True) == "tsx"
        assert registry.default_extension(False) == "jsx"

    def test_leading_dot_stripped(self, journal: list[tuple[str, str]]) -> None:
        registry = PluginRegistry([RecordingPlugin("a", journal, extension=".mjs")])
        assert registry.default_extension(False) == "mjs"

    def test_none_without_plugins(self) -> None:
        assert PluginRegistry().default_extension(False) is None


class TestConfigure:
    def test_configure_called_with_config(self, tmp_path: Path) -> None:
        seen: list[ProwlConfig] = []

        class Needs(Plugin):
            def configure(self, config: ProwlConfig) -> None:
                seen.append(config)

        config = ProwlConfig(root=tmp_path)
        failures = PluginRegistry([Needs(), Plugin()]).configure(config)

        assert failures == ()
        assert seen == [config]

    def test_names(self, journal: list[tuple[str, str]]) -> None:
        registry = PluginRegistry([RecordingPlugin("a", journal), Plugin()])
        assert registry.names() == ("a", "Plugin")
        assert len(registry) == 2
