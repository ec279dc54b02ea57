"""Render a single blog post inside the page layout."""

from __future__ import annotations

import datetime as dt
from typing import Any

from markupsafe import Markup
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import SiteConfig
from .document import BUILD_TIME, render_document
from .head import HeadMetadata
from .template import Route, render_page
from .templates import render_template
from .typography import Typography

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

ERROR_PAGE_PATH = "/404.html"


class Post(BaseModel):
    """A rendered blog entry handed over by the content pipeline."""

    model_config = ConfigDict(frozen=True)

    title: str
    date: dt.datetime | dt.date
    body: str = Field(description="Trusted, already-rendered HTML.")
    path: str

    @field_validator("body", mode="after")
    def _trust_body(cls, value: str) -> Any:
        return Markup(value)


def format_date(value: dt.date) -> str:
    """Format ``value`` as e.g. ``May 7, 2017``."""
    return f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"


def render_post(post: Post, *, head: HeadMetadata, site: SiteConfig) -> Markup:
    """Render the post title, date and body, and record its document title."""
    head.set_title(f"{site.title} | {post.title}")
    context = {
        "post": post,
        "show_header": post.path != ERROR_PAGE_PATH,
        "posted_on": format_date(post.date),
    }
    return render_template(site, "post.html", context)


def render_post_page(
    post: Post,
    *,
    site: SiteConfig,
    typography: Typography,
    build_time: int = BUILD_TIME,
    stylesheet: Markup | None = None,
) -> str:
    """Render ``post`` all the way to a complete HTML document."""
    head = HeadMetadata()
    content = render_post(post, head=head, site=site)
    route = Route(pathname=post.path, title=head.title or site.title)
    page = render_page(content, site=site, typography=typography, route=route)
    return render_document(
        page,
        head.rewind(),
        site=site,
        typography=typography,
        build_time=build_time,
        stylesheet=stylesheet,
    )
