"""Jinja2 environment used by the theme's page components."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from markupsafe import Markup

from .config import SiteConfig

logger = logging.getLogger(__name__)

BUILTIN_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
REQUIRED_TEMPLATES = ("document.html", "page.html", "post.html")


class TemplateError(RuntimeError):
    """Raised when a theme template cannot be found or rendered."""


@lru_cache(maxsize=8)
def _environment(search_paths: tuple[str, ...]) -> Environment:
    environment = Environment(
        loader=FileSystemLoader(list(search_paths)),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    for name in REQUIRED_TEMPLATES:
        try:
            environment.get_template(name)
        except TemplateNotFound as exc:
            raise TemplateError(f"Required template '{name}' not found in {', '.join(search_paths)}.") from exc
    return environment


def template_environment(site: SiteConfig) -> Environment:
    """Return the environment for ``site``; its own templates shadow the built-in ones."""
    search_paths: list[str] = []
    if site.templates_dir is not None:
        if site.templates_dir.exists():
            search_paths.append(str(site.templates_dir))
        else:
            logger.warning("Template override directory %s does not exist; using built-in templates.", site.templates_dir)
    search_paths.append(str(BUILTIN_TEMPLATES_DIR))
    return _environment(tuple(search_paths))


def render_template(site: SiteConfig, name: str, context: dict[str, Any]) -> Markup:
    template = template_environment(site).get_template(name)
    return Markup(template.render(**context))
