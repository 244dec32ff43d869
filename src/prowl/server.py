"""Live server — push channel plus thin static serving.

One listening socket handles both:

- WebSocket upgrades on ``config.hmr_path``: each accepted channel is added
  to the ConnectionRegistry and removed when it closes.
- Plain GET requests, answered from ``process_request``: ``/`` serves the
  index document, ``/dist/...`` the output directory, anything else the
  watched source directory. HTML gets the live-reload client injected.
  ``/__prowl/hmr-client.js`` and ``/__prowl/entry`` expose the client and
  the resolved entry point.

Static serving is deliberately minimal; it exists so a browser can load
the project and the reload client without another tool.
"""

from __future__ import annotations

import asyncio
import json
import mimetypes
from collections.abc import Callable
from http import HTTPStatus
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import unquote, urlsplit

from websockets.asyncio.server import Server, ServerConnection, serve
from websockets.datastructures import Headers
from websockets.http11 import Request, Response

from prowl._errors import BootstrapError
from prowl.reactive.hmr import CLIENT_PATH, ENTRY_PATH, inject_hmr_script, render_client

if TYPE_CHECKING:
    from prowl.config import ProwlConfig
    from prowl.reactive.connections import ConnectionRegistry

# URL prefix for the build output directory
DIST_PREFIX = "/dist/"

_SCRIPT_TYPES: dict[str, str] = {
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".jsx": "text/javascript",
    ".ts": "text/javascript",
    ".tsx": "text/javascript",
}


def content_type_for(path: Path) -> str:
    """MIME type for *path*, with charset for text types."""
    ctype = _SCRIPT_TYPES.get(path.suffix.lower())
    if ctype is None:
        ctype = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    if ctype.startswith("text/") or ctype == "application/json":
        ctype += "; charset=utf-8"
    return ctype


def make_response(status: HTTPStatus, body: bytes, content_type: str) -> Response:
    headers = Headers([
        ("Content-Type", content_type),
        ("Content-Length", str(len(body))),
        ("Cache-Control", "no-cache"),
        ("Connection", "close"),
    ])
    return Response(status.value, status.phrase, headers, body)


def _not_found() -> Response:
    return make_response(HTTPStatus.NOT_FOUND, b"Not found\n", "text/plain; charset=utf-8")


class LiveServer:
    """Serves the project and accepts live-reload push channels.

    Args:
        config: Resolved ProwlConfig.
        connections: Registry that tracks open push channels.
        entry: Returns the resolved entry point (None before resolution).

    """

    def __init__(
        self,
        config: ProwlConfig,
        connections: ConnectionRegistry,
        entry: Callable[[], str | None],
    ) -> None:
        self._config = config
        self._connections = connections
        self._entry = entry
        self._server: Server | None = None

    @property
    def port(self) -> int:
        """Bound port (differs from config when config.port is 0)."""
        if self._server is None:
            return self._config.port
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> None:
        """Bind the listening socket.

        Raises:
            BootstrapError: The address could not be bound.

        """
        try:
            self._server = await serve(
                self.handle_channel,
                self._config.host,
                self._config.port,
                process_request=self.process_request,
            )
        except OSError as exc:
            msg = f"Cannot listen on {self._config.host}:{self._config.port}: {exc}"
            raise BootstrapError(msg) from exc

    async def close(self) -> None:
        if self._server is None:
            return
        self._server.close()
        await self._server.wait_closed()
        self._server = None

    async def handle_channel(self, connection: ServerConnection) -> None:
        """Track *connection* for its whole lifetime. Inbound frames are ignored."""
        self._connections.add(connection)
        try:
            await connection.wait_closed()
        finally:
            self._connections.remove(connection)

    async def process_request(
        self, connection: ServerConnection, request: Request,
    ) -> Response | None:
        """Answer non-upgrade requests; return None to accept the push channel."""
        path = unquote(urlsplit(request.path).path)
        if path == self._config.hmr_path:
            return None
        if path == CLIENT_PATH:
            body = self.client_js().encode()
            return make_response(HTTPStatus.OK, body, "text/javascript; charset=utf-8")
        if path == ENTRY_PATH:
            body = json.dumps({"entry": self._entry()}).encode()
            return make_response(HTTPStatus.OK, body, "application/json; charset=utf-8")

        target = self.resolve_static(path)
        if target is None:
            return _not_found()
        try:
            body = await asyncio.to_thread(target.read_bytes)
        except OSError:
            return _not_found()

        ctype = content_type_for(target)
        if ctype.startswith("text/html"):
            text = body.decode("utf-8", errors="replace")
            body = inject_hmr_script(text, self.client_js()).encode()
        return make_response(HTTPStatus.OK, body, ctype)

    def client_js(self) -> str:
        return render_client(self._config.hmr_path, self._entry())

    def resolve_static(self, url_path: str) -> Path | None:
        """Map a URL path to a file under the watched or output root.

        Returns None for missing files, directories, and anything that
        would escape its root.

        """
        if url_path in ("", "/"):
            root, rel = self._config.watched_path, self._config.index_document
        elif url_path.startswith(DIST_PREFIX):
            root, rel = self._config.output_path, url_path[len(DIST_PREFIX):]
        else:
            root, rel = self._config.watched_path, url_path.lstrip("/")

        base = root.resolve()
        candidate = (base / rel).resolve()
        if not candidate.is_relative_to(base) or not candidate.is_file():
            return None
        return candidate
