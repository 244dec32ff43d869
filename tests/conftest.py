"""Shared test fixtures for prowl."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from prowl.config import ProwlConfig


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Create a minimal project: frontend/ sources and an empty dist/.

    Returns the project root.
    """
    src = tmp_path / "frontend"
    src.mkdir()
    (src / "main.html").write_text(
        "<!DOCTYPE html>\n<html>\n<body>\n  <div id=\"root\"></div>\n</body>\n</html>\n"
    )
    (src / "app.js").write_text("// entry\nconsole.log('hi');\n")
    (src / "style.css").write_text("/* base */\nbody { margin: 0; }\n")
    (src / "App.jsx").write_text("export default () => <p>hi</p>;\n")
    (src / ".scratch.swp").write_text("editor noise")
    (tmp_path / "dist").mkdir()
    return tmp_path


@pytest.fixture
def config(tmp_project: Path) -> ProwlConfig:
    """A ProwlConfig rooted at tmp_project with a short debounce window."""
    return ProwlConfig(root=tmp_project, port=0, debounce_ms=20)


class FakeChannel:
    """Push channel double that records sent frames.

    Hashes by identity, like a real connection object.
    """

    def __init__(self, *, fail_with: BaseException | None = None) -> None:
        self.sent: list[str] = []
        self.fail_with = fail_with

    async def send(self, message: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(message)


class FakeServer:
    """Stand-in for LiveServer that never binds a socket."""

    def __init__(self, *, fail_with: BaseException | None = None) -> None:
        self.fail_with = fail_with
        self.started = False
        self.closed = False

    @property
    def port(self) -> int:
        return 0

    async def start(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.started = True

    async def close(self) -> None:
        self.closed = True


class RecordingPlugin:
    """Plugin double that appends every hook call to a shared journal."""

    def __init__(
        self,
        name: str,
        journal: list[tuple[str, str]],
        *,
        entry: str | None = None,
        extension: str | None = None,
        fail_on: frozenset[str] = frozenset(),
    ) -> None:
        self.name = name
        self.journal = journal
        self._entry = entry
        self._fail_on = fail_on
        if extension is not None:
            self.default_extension = lambda typescript: extension

    def _log(self, hook: str, detail: Any = "") -> None:
        self.journal.append((self.name, f"{hook}{detail}"))
        if hook in self._fail_on:
            msg = f"{self.name} {hook} boom"
            raise RuntimeError(msg)

    async def on_file_change(self, path: Path, kind: str) -> None:
        self._log("on_file_change", f":{path.name}:{kind}")

    async def on_server_start(self) -> None:
        self._log("on_server_start")

    async def determine_entry_file(self) -> str | None:
        self._log("determine_entry_file")
        return self._entry


@pytest.fixture
def journal() -> list[tuple[str, str]]:
    return []
