"""Live-reload client — script injected into served HTML documents.

The script opens the push channel on the page's own host (``wss://`` on
https pages) and reloads the page on any recognized reload token.
Unknown frames are ignored. It also publishes the resolved entry point
as ``window.__PROWL_ENTRY__`` for the application loader.
"""

from __future__ import annotations

import json

from prowl._types import ReloadSignal

RELOAD: ReloadSignal = "reload"
RELOAD_MAIN: ReloadSignal = "reload-main"

# Every token a client treats as "reload the page now"
RELOAD_SIGNALS: frozenset[str] = frozenset({RELOAD, RELOAD_MAIN})

# Served copy of the client, for pages that include it by URL
CLIENT_PATH = "/__prowl/hmr-client.js"

# JSON endpoint reporting the resolved entry point
ENTRY_PATH = "/__prowl/entry"

_CLIENT_JS = """\
(function() {
  window.__PROWL_ENTRY__ = %(entry)s;
  var signals = %(signals)s;
  var proto = location.protocol === 'https:' ? 'wss://' : 'ws://';
  var ws = new WebSocket(proto + location.host + %(path)s);
  ws.addEventListener('open', function() {
    console.log('[prowl] live reload connected');
  });
  ws.addEventListener('message', function(event) {
    if (signals.indexOf(event.data) !== -1) {
      location.reload();
    }
  });
  ws.addEventListener('close', function() {
    console.log('[prowl] live reload disconnected');
  });
})();
"""


def render_client(hmr_path: str, entry: str | None) -> str:
    """Return the client JavaScript for the given channel path and entry."""
    return _CLIENT_JS % {
        "entry": json.dumps(entry).replace("</", "<\\/"),
        "signals": json.dumps(sorted(RELOAD_SIGNALS)),
        "path": json.dumps(hmr_path),
    }


def inject_hmr_script(body: str, client_js: str) -> str:
    """Insert *client_js* as an inline script before ``</body>``.

    Falls back to before ``</html>``, then to appending.

    """
    tag = f"<script data-prowl-hmr>\n{client_js}</script>\n"
    if "</body>" in body:
        return body.replace("</body>", tag + "</body>", 1)
    if "</html>" in body:
        return body.replace("</html>", tag + "</html>", 1)
    return body + tag
