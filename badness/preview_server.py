"""Local preview server for rendered pages.

Outside production the server treats every HTML page it serves as the live
document and appends freshly built typography styles to it, so edits to the
typography options show up on reload without re-rendering the posts.
"""

from __future__ import annotations

import contextlib
import logging
from http import HTTPStatus
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any, Callable, Iterator

from .document import HtmlDocument
from .typography import Typography

logger = logging.getLogger(__name__)

TypographyFactory = Callable[[], Typography]


class _ThreadingHTTPServer(ThreadingHTTPServer):
    daemon_threads = True
    allow_reuse_address = True


def make_request_handler(
    directory: Path,
    *,
    typography_factory: TypographyFactory | None = None,
) -> type[SimpleHTTPRequestHandler]:
    """Create a handler rooted at ``directory``.

    With ``typography_factory`` set, HTML responses get the factory's styles
    injected into their head. Config or option errors raised by the factory
    (``OSError`` or ``ValueError``) are logged and the page is served as is.
    """
    directory_path = str(directory)

    class PreviewRequestHandler(SimpleHTTPRequestHandler):
        def __init__(self, *args: Any, **kwargs: Any) -> None:
            super().__init__(*args, directory=directory_path, **kwargs)

        extensions_map = dict(SimpleHTTPRequestHandler.extensions_map)
        extensions_map.update(
            {
                ".js": "application/javascript; charset=utf-8",
                ".css": "text/css; charset=utf-8",
                ".xml": "application/xml; charset=utf-8",
                ".svg": "image/svg+xml",
            }
        )

        def do_GET(self) -> None:
            payload = self._rendered_html()
            if payload is None:
                super().do_GET()
                return
            self._send_html_headers(payload)
            self.wfile.write(payload)

        def do_HEAD(self) -> None:
            payload = self._rendered_html()
            if payload is None:
                super().do_HEAD()
                return
            self._send_html_headers(payload)

        def _rendered_html(self) -> bytes | None:
            if typography_factory is None:
                return None
            target = self._html_target()
            if target is None:
                return None
            html = target.read_text(encoding="utf-8")
            try:
                typography = typography_factory()
            except (OSError, ValueError) as exc:
                logger.warning("Serving %s without typography styles: %s", target, exc)
                return html.encode("utf-8")
            document = HtmlDocument(html)
            typography.inject_styles(document)
            return document.html.encode("utf-8")

        def _send_html_headers(self, payload: bytes) -> None:
            self.send_response(HTTPStatus.OK)
            self.send_header("Content-Type", "text/html; charset=utf-8")
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()

        def _html_target(self) -> Path | None:
            request_path = self.path.split("?", 1)[0].split("#", 1)[0]
            target = Path(self.translate_path(self.path))
            if target.is_dir():
                if not request_path.endswith("/"):
                    return None
                target = target / "index.html"
            if target.suffix.lower() != ".html" or not target.is_file():
                return None
            return target

    return PreviewRequestHandler


@contextlib.contextmanager
def serve(
    host: str,
    port: int,
    handler: type[SimpleHTTPRequestHandler],
) -> Iterator[ThreadingHTTPServer]:
    """Context manager that creates and cleans up the HTTP server."""
    server = _ThreadingHTTPServer((host, port), handler)
    try:
        yield server
    finally:
        try:
            server.shutdown()
        finally:
            server.server_close()
