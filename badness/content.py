"""Load Markdown posts with YAML front matter into ``Post`` objects."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .markdown import render_markdown
from .post import Post

logger = logging.getLogger(__name__)

FRONT_MATTER_DELIMITER = "---"


class FrontMatterError(ValueError):
    """Raised when a post has malformed or incomplete front matter."""


def load_post(path: str | Path) -> Post:
    """Read a Markdown post and render its body.

    The front matter must carry ``title`` and ``date``; ``path`` defaults to
    ``/<file stem>/``.
    """
    source_path = Path(path)
    text = source_path.read_text(encoding="utf-8")
    front_matter, body = _split_front_matter(text, source_path)

    data = dict(front_matter)
    if "path" not in data:
        data["path"] = f"/{source_path.stem}/"
        logger.debug("Post %s has no path; using %s", source_path, data["path"])

    try:
        return Post(
            title=data.get("title"),
            date=data.get("date"),
            body=render_markdown(body),
            path=str(data["path"]),
        )
    except ValidationError as exc:
        raise FrontMatterError(f"Invalid front matter in {source_path}: {exc}") from exc


def _split_front_matter(text: str, source_path: Path) -> tuple[dict[str, Any], str]:
    lines = text.splitlines()
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        raise FrontMatterError(f"{source_path} does not start with a '---' front matter block.")

    front_lines: list[str] = []
    for idx, line in enumerate(lines[1:], start=1):
        if line.strip() == FRONT_MATTER_DELIMITER:
            try:
                data = yaml.safe_load("\n".join(front_lines)) or {}
            except yaml.YAMLError as exc:
                raise FrontMatterError(f"Unreadable front matter in {source_path}: {exc}") from exc
            if not isinstance(data, dict):
                raise FrontMatterError(f"Front matter in {source_path} must be a mapping.")
            body = "\n".join(lines[idx + 1 :])
            return data, body.strip()
        front_lines.append(line)
    raise FrontMatterError(f"Closing front matter delimiter '---' missing in {source_path}.")
