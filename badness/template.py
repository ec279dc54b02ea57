"""Shared page layout: header bar, content, footer, and the comment widget hook."""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Mapping, Protocol

from markupsafe import Markup

from .config import CommentsConfig, SiteConfig
from .links import absolute_url, prefix_link
from .templates import render_template
from .typography import Typography

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Route:
    """The page currently on display."""

    pathname: str
    title: str


@dataclass(frozen=True, slots=True)
class CommentConfig:
    """Values handed to the comment widget for one page."""

    page_url: str
    page_identifier: str


class WidgetHost(Protocol):
    """The environment a rendered page runs in (a browser window, a test double)."""

    def math_available(self) -> bool: ...

    def typeset_math(self) -> None: ...

    def set_comment_config(self, config: CommentConfig) -> None: ...

    def comment_widget_loaded(self) -> bool: ...

    def reset_comment_widget(self, config: CommentConfig) -> None: ...

    def inject_script(self, src: str, attributes: Mapping[str, str]) -> None: ...


def resolve_comment_path(pathname: str, comments: CommentsConfig) -> str:
    """Return the pathname a page's comment thread is keyed on.

    Only the pathnames listed in ``canonical_overrides`` are remapped; every
    other page keeps its own pathname.
    """
    return comments.canonical_overrides.get(pathname, pathname)


def comment_config_for(route: Route, site: SiteConfig) -> CommentConfig:
    path = resolve_comment_path(route.pathname, site.comments)
    return CommentConfig(page_url=absolute_url(path, site), page_identifier=route.title)


def on_route_changed(route: Route, host: WidgetHost, site: SiteConfig) -> None:
    """Run the page's widget effects after it is first shown or its route changes.

    Effects are fire-and-forget: a widget script that never loads leaves the
    comment mount empty.
    """
    if host.math_available():
        host.typeset_math()

    if not site.comments.enabled:
        return

    config = comment_config_for(route, site)
    host.set_comment_config(config)
    if host.comment_widget_loaded():
        host.reset_comment_widget(config)
        return
    logger.debug("Loading comment widget for %s", config.page_url)
    host.inject_script(
        site.comments.embed_url,
        {"data-timestamp": str(int(time.time() * 1000))},
    )


def _route_settings(route: Route | None, site: SiteConfig) -> dict[str, Any] | None:
    if route is None:
        return None
    settings: dict[str, Any] = {"comments": None}
    if site.comments.enabled:
        comments = asdict(comment_config_for(route, site))
        comments["embed_url"] = site.comments.embed_url
        settings["comments"] = comments
    return settings


def render_page(
    children: Markup,
    *,
    site: SiteConfig,
    typography: Typography,
    route: Route | None = None,
) -> Markup:
    """Wrap ``children`` in the site layout.

    ``children`` is trusted HTML and is inserted verbatim. When ``route`` is
    given, the layout also carries a small script that performs the
    ``on_route_changed`` effects in the browser.
    """
    context = {
        "children": Markup(children),
        "site_title": site.title,
        "home_href": prefix_link("/", site),
        "header": site.header,
        "footer": site.footer,
        "rhythm": typography.rhythm,
        "route_settings": _route_settings(route, site),
    }
    return render_template(site, "page.html", context)
