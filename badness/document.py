"""The outer HTML document every rendered page is placed in."""

from __future__ import annotations

import logging
import re
import time

from markupsafe import Markup

from .config import SiteConfig
from .head import HeadSnapshot
from .links import prefix_link
from .templates import render_template
from .typography import Typography

logger = logging.getLogger(__name__)

HEAD_CLOSE_RE = re.compile(r"</head\s*>", re.IGNORECASE)


class DocumentError(RuntimeError):
    """Raised when the document shell cannot be assembled."""


def build_timestamp() -> int:
    """Milliseconds since the epoch, used to bust caches of the client bundle."""
    return int(time.time() * 1000)


BUILD_TIME = build_timestamp()


class HtmlDocument:
    """An HTML page held in memory that accepts extra head markup."""

    def __init__(self, html: str) -> None:
        self.html = html

    def insert_head_html(self, markup: str) -> None:
        match = HEAD_CLOSE_RE.search(self.html)
        if match is None:
            logger.debug("Document has no </head>; prepending markup.")
            self.html = markup + self.html
            return
        self.html = f"{self.html[: match.start()]}{markup}{self.html[match.start():]}"


def load_stylesheet(site: SiteConfig) -> Markup | None:
    """Read the compiled stylesheet for production builds.

    Development builds never inline it and return ``None``.
    """
    if not site.production:
        return None
    path = site.stylesheet_path
    try:
        return Markup(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise DocumentError(f"Compiled stylesheet not found at {path}; build it before a production render.") from exc
    except OSError as exc:
        raise DocumentError(f"Unable to read compiled stylesheet {path}: {exc}") from exc


def render_document(
    body: Markup,
    head: HeadSnapshot,
    *,
    site: SiteConfig,
    typography: Typography,
    build_time: int = BUILD_TIME,
    stylesheet: Markup | None = None,
) -> str:
    """Assemble the complete HTML document around the rendered page ``body``.

    ``body`` and ``stylesheet`` are trusted and inserted verbatim; the
    stylesheet block is emitted only when one is given.
    """
    context = {
        "body": Markup(body),
        "head": head,
        "scripts": site.scripts,
        "typography": typography,
        "stylesheet": Markup(stylesheet) if stylesheet is not None else None,
        "bundle_src": prefix_link(f"{site.scripts.bundle_path}?t={build_time}", site),
    }
    return str(render_template(site, "document.html", context))
