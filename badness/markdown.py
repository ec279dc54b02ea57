"""Markdown rendering for post bodies."""

from __future__ import annotations

from functools import lru_cache
from typing import cast

from markdown_it import MarkdownIt
from markupsafe import Markup
from mdit_py_plugins.footnote import footnote_plugin


@lru_cache(maxsize=1)
def _renderer() -> MarkdownIt:
    # Raw HTML stays enabled: posts embed tweets and MathJax markup.
    md = MarkdownIt("commonmark", {"html": True, "typographer": True})
    md.enable("table").enable("strikethrough")
    md.use(footnote_plugin)
    return md


def render_markdown(text: str) -> Markup:
    """Render a post body to trusted HTML."""
    if not text.strip():
        return Markup("")
    return Markup(cast(str, _renderer().render(text)))
