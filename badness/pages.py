"""Write rendered post documents into the output directory."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Iterable

from markupsafe import Markup

from .config import SiteConfig
from .document import BUILD_TIME
from .post import Post, render_post_page
from .typography import Typography

logger = logging.getLogger(__name__)


def output_path_for(post_path: str, output_dir: Path) -> Path:
    """Map a post's URL path to a file under ``output_dir``.

    Paths ending in ``/`` become ``index.html`` inside that directory.
    """
    relative = PurePosixPath(post_path.lstrip("/"))
    if ".." in relative.parts:
        raise ValueError(f"Post path '{post_path}' must stay inside the site root.")
    if post_path.endswith("/") or not relative.parts:
        relative = relative / "index.html"
    return output_dir.joinpath(*relative.parts)


def write_post_pages(
    posts: Iterable[Post],
    site: SiteConfig,
    typography: Typography,
    *,
    build_time: int = BUILD_TIME,
    stylesheet: Markup | None = None,
) -> list[Path]:
    """Render every post and write its document; return the written paths."""
    written: list[Path] = []
    for post in posts:
        html = render_post_page(
            post,
            site=site,
            typography=typography,
            build_time=build_time,
            stylesheet=stylesheet,
        )
        destination = output_path_for(post.path, site.output_dir)
        if destination in written:
            logger.warning("Post path %s rendered twice; the later post wins.", post.path)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(html, encoding="utf-8")
        written.append(destination)
    return written
