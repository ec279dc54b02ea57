from __future__ import annotations

import threading
import urllib.request
from pathlib import Path

import pytest

from badness.preview_server import make_request_handler, serve
from badness.typography import Typography, TypographyError

PAGE = "<!DOCTYPE html><html><head><title>x</title></head><body><p>hi</p></body></html>"


def _request(directory: Path, path: str, method: str = "GET", **kwargs) -> tuple[str, str | None]:
    handler = make_request_handler(directory, **kwargs)
    with serve("127.0.0.1", 0, handler) as server:
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        port = server.server_address[1]
        request = urllib.request.Request(f"http://127.0.0.1:{port}{path}", method=method)
        with urllib.request.urlopen(request, timeout=5) as response:
            return response.read().decode("utf-8"), response.headers.get("Content-Length")


def _fetch(directory: Path, path: str, **kwargs) -> str:
    return _request(directory, path, **kwargs)[0]


def _broken_typography() -> Typography:
    raise TypographyError("Unknown typography plugin(s): shadows")


def test_preview_injects_typography_into_html(tmp_path: Path) -> None:
    (tmp_path / "post").mkdir()
    (tmp_path / "post" / "index.html").write_text(PAGE, encoding="utf-8")

    body = _fetch(tmp_path, "/post/", typography_factory=Typography)

    assert '<style id="typography.js">' in body
    assert body.index('<style id="typography.js">') < body.index("</head>")
    assert "fonts.googleapis.com" in body
    assert "<p>hi</p>" in body


def test_preview_head_reports_injected_length(tmp_path: Path) -> None:
    (tmp_path / "index.html").write_text(PAGE, encoding="utf-8")

    body, get_length = _request(tmp_path, "/index.html", typography_factory=Typography)
    head_body, head_length = _request(tmp_path, "/index.html", method="HEAD", typography_factory=Typography)

    assert head_body == ""
    assert get_length == head_length == str(len(body.encode("utf-8")))


def test_preview_serves_page_when_typography_fails(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    (tmp_path / "index.html").write_text(PAGE, encoding="utf-8")

    with caplog.at_level("WARNING", logger="badness.preview_server"):
        body = _fetch(tmp_path, "/index.html", typography_factory=_broken_typography)

    assert body == PAGE
    assert "without typography styles" in caplog.text


def test_preview_leaves_other_files_alone(tmp_path: Path) -> None:
    (tmp_path / "styles.css").write_text("h1{}", encoding="utf-8")

    assert _fetch(tmp_path, "/styles.css", typography_factory=Typography) == "h1{}"


def test_preview_without_factory_serves_pages_unchanged(tmp_path: Path) -> None:
    (tmp_path / "index.html").write_text(PAGE, encoding="utf-8")

    assert _fetch(tmp_path, "/index.html") == PAGE
