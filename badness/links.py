"""Helpers for turning site-relative paths into deployable URLs."""

from __future__ import annotations

from .config import SiteConfig


def prefix_link(path: str, site: SiteConfig) -> str:
    """Prepend the deployment prefix to a site-relative ``path`` when enabled.

    Absolute and protocol-relative URLs pass through unchanged.
    """
    if path.startswith(("http://", "https://", "//")):
        return path
    if not site.prefix_links or not site.link_prefix:
        return path
    normalized = path if path.startswith("/") else f"/{path}"
    return f"{site.link_prefix}{normalized}"


def absolute_url(path: str, site: SiteConfig) -> str:
    """Join a site-relative ``path`` onto the canonical ``base_url``."""
    if path.startswith(("http://", "https://")):
        return path
    normalized = path if path.startswith("/") else f"/{path}"
    return f"{site.base_url}{normalized}"
