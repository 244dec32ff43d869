"""Tests for prowl.banner — startup banner output."""

from __future__ import annotations

import io
import sys
from pathlib import Path
from unittest.mock import patch

from prowl.banner import print_banner
from prowl.config import ProwlConfig


class TestPrintBanner:
    """Tests for the startup banner."""

    def _capture_banner(self, **kwargs: object) -> str:
        """Call print_banner and capture stderr output."""
        buf = io.StringIO()
        kwargs.setdefault("entry", "App.jsx")
        with patch.object(sys, "stderr", buf):
            config = ProwlConfig(root=Path("/tmp/test-app"))
            print_banner(config, file_count=5, **kwargs)  # type: ignore[arg-type]
        return buf.getvalue()

    def test_dev_banner(self) -> None:
        output = self._capture_banner(load_ms=42.5)

        assert "Prowl" in output
        assert "5 files hashed" in output
        assert "42ms" in output
        assert "live" in output
        assert "/hmr" in output
        assert "http://127.0.0.1:3000" in output
        assert "Watching for changes" in output

    def test_paths_and_entry(self) -> None:
        output = self._capture_banner(entry="main.tsx")
        assert "/tmp/test-app/frontend" in output
        assert "/tmp/test-app/dist" in output
        assert "entry: main.tsx" in output

    def test_plugins_listed(self) -> None:
        output = self._capture_banner(plugins=("jsx", "css"))
        assert "plugins: jsx, css" in output

    def test_no_plugins_line_without_plugins(self) -> None:
        assert "plugins:" not in self._capture_banner()

    def test_bound_port_overrides_config(self) -> None:
        output = self._capture_banner(port=51234)
        assert "http://127.0.0.1:51234" in output

    def test_singular_file(self) -> None:
        buf = io.StringIO()
        with patch.object(sys, "stderr", buf):
            print_banner(ProwlConfig(root=Path("/tmp/x")), file_count=1, entry="App.jsx")
        assert "1 file hashed" in buf.getvalue()

    def test_warnings(self) -> None:
        output = self._capture_banner(warnings=["jsx.on_server_start failed"])
        assert "jsx.on_server_start failed" in output

    def test_no_timing_when_zero(self) -> None:
        output = self._capture_banner(load_ms=0.0)
        (line,) = [ln for ln in output.splitlines() if "hashed" in ln]
        assert "ms" not in line
