"""JSX plugin — transpiles component scripts into the output directory.

On server start every ``.jsx``/``.tsx`` file under the watched root is
transpiled; afterwards each changed component script is transpiled again.
``src/components/Card.jsx`` lands at ``<out>/components/Card.js``.

The transform itself is a ``Transpiler``: an async callable taking the
source and target paths. The default shells out to Babel through bunx.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, TypeAlias

from prowl._errors import PluginError
from prowl._types import FileKind
from prowl.content.kinds import file_kind, is_hidden
from prowl.plugins.base import Plugin

if TYPE_CHECKING:
    from prowl.config import ProwlConfig

Transpiler: TypeAlias = Callable[[Path, Path], Awaitable[None]]


class BabelTranspiler:
    """Runs ``<command> <source> --out-file <target>`` and waits for it.

    Raises:
        PluginError: The command is missing or exits non-zero.

    """

    def __init__(self, command: Sequence[str] = ("bunx", "babel")) -> None:
        self._command = tuple(command)

    async def __call__(self, source: Path, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            proc = await asyncio.create_subprocess_exec(
                *self._command, str(source), "--out-file", str(target),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            msg = f"cannot run {self._command[0]}: {exc}"
            raise PluginError(msg) from exc

        _stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            detail = stderr.decode(errors="replace").strip()
            msg = f"{' '.join(self._command)} exited with {proc.returncode}: {detail}"
            raise PluginError(msg)


class JSXPlugin(Plugin):
    """Component-script transpiler plugin.

    Args:
        src_dir: Watched source directory. Filled from config when omitted.
        out_dir: Output directory. Filled from config when omitted.
        transpiler: Transform to run per file.

    """

    name = "jsx"

    def __init__(
        self,
        src_dir: Path | None = None,
        out_dir: Path | None = None,
        transpiler: Transpiler | None = None,
    ) -> None:
        self.src_dir = src_dir
        self.out_dir = out_dir
        self._transpile = transpiler if transpiler is not None else BabelTranspiler()

    def configure(self, config: ProwlConfig) -> None:
        """Adopt the config's directories unless set explicitly."""
        if self.src_dir is None:
            self.src_dir = config.watched_path
        if self.out_dir is None:
            self.out_dir = config.output_path

    def default_extension(self, typescript: bool = False) -> str:
        return "tsx" if typescript else "jsx"

    async def on_file_change(self, path: Path, kind: FileKind) -> None:
        if kind == "component":
            await self.transpile(path)

    async def on_server_start(self) -> None:
        print("  JSX plugin initialized", file=sys.stderr)
        src = self._require(self.src_dir, "src_dir")
        if not src.is_dir():
            return
        for path in sorted(src.rglob("*")):
            if not path.is_file() or is_hidden(path, src) or file_kind(path) != "component":
                continue
            try:
                await self.transpile(path)
            except PluginError as exc:
                print(f"  Error transpiling {path}: {exc}", file=sys.stderr)

    def output_for(self, source: Path) -> Path:
        """Where the transpiled form of *source* is written."""
        src = self._require(self.src_dir, "src_dir")
        out = self._require(self.out_dir, "out_dir")
        try:
            rel = source.relative_to(src)
        except ValueError:
            rel = Path(source.name)
        return out / rel.with_suffix(".js")

    async def transpile(self, source: Path) -> Path:
        """Transpile *source* and return the written output path."""
        target = self.output_for(source)
        await self._transpile(source, target)
        print(f"  Transpiled {source.name} to {target}", file=sys.stderr)
        return target

    @staticmethod
    def _require(value: Path | None, field: str) -> Path:
        if value is None:
            msg = f"JSXPlugin.{field} is not set; call configure() or pass it explicitly"
            raise PluginError(msg)
        return value
