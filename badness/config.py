import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from .typography import TypographyOptions

CONFIG_FILENAME = "badness.yml"
ENVIRONMENT_VARIABLE = "BADNESS_ENV"


def _default_canonical_overrides() -> dict[str, str]:
    # One post moved after comments were collected under its old URL.
    return {"/escaping-hell-with-monads/": "/posts/2017-05-07-escaping-hell-with-monads.html"}


class HeaderConfig(BaseModel):
    """Appearance of the sticky header bar."""

    background: str = Field(default="#1244ee")
    link_color: str = Field(default="black")
    max_width: str = Field(default="40rem", description="Maximum width of the content container.")
    icon_href: str = Field(default="//www.twitter.com/ali_pang")
    icon_src: str = Field(default="https://g.twimg.com/dev/documentation/image/Twitter_logo_blue_48.png")


class FooterConfig(BaseModel):
    """Links rendered in the fixed footer block."""

    rss_url: str = Field(default="http://philipnilsson.github.io/Badness10k/atom.xml")
    rss_label: str = Field(default="RSS feed for this page")
    twitter_handle: str = Field(default="ali_pang")

    @field_validator("twitter_handle")
    def _strip_at(cls, value: str) -> str:
        return value.strip().lstrip("@")

    @property
    def twitter_url(self) -> str:
        return f"https://twitter.com/{self.twitter_handle}"


class CommentsConfig(BaseModel):
    """Settings for the embedded comment widget."""

    enabled: bool = Field(default=True)
    shortname: str = Field(default="badness-10-000", description="Disqus forum shortname.")
    canonical_overrides: dict[str, str] = Field(
        default_factory=_default_canonical_overrides,
        description="Pathnames whose comment threads live under a different URL.",
    )

    @property
    def embed_url(self) -> str:
        return f"https://{self.shortname}.disqus.com/embed.js"


class ScriptsConfig(BaseModel):
    """Third-party scripts loaded by every document."""

    mathjax_url: str = Field(
        default="https://cdn.mathjax.org/mathjax/latest/MathJax.js?config=TeX-MML-AM_CHTML"
    )
    twitter_widgets_url: str = Field(default="//platform.twitter.com/widgets.js")
    bundle_path: str = Field(default="/bundle.js", description="Site-relative path of the client bundle.")


class SiteConfig(BaseModel):
    title: str = Field(default="Badness 10.000")
    base_url: str = Field(
        default="https://philipnilsson.github.io/Badness10k",
        description="Canonical site URL used for comment thread URLs.",
    )
    link_prefix: str = Field(default="/Badness10k")
    prefix_links: bool = Field(
        default=False,
        description="Prepend link_prefix to site-relative links (deployments under a sub-path).",
    )
    production: bool = Field(default=False)
    output_dir: Path = Field(default=Path("public"))
    templates_dir: Path | None = Field(
        default=None,
        description="Optional directory whose templates take precedence over the built-in ones.",
    )
    stylesheet_path: Path = Field(
        default=Path("public/styles.css"),
        description="Compiled stylesheet inlined into production documents.",
    )
    header: HeaderConfig = Field(default_factory=HeaderConfig)
    footer: FooterConfig = Field(default_factory=FooterConfig)
    comments: CommentsConfig = Field(default_factory=CommentsConfig)
    scripts: ScriptsConfig = Field(default_factory=ScriptsConfig)
    typography: TypographyOptions = Field(default_factory=TypographyOptions)

    @field_validator("output_dir", "stylesheet_path", mode="before")
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)

    @field_validator("templates_dir", mode="before")
    def _ensure_optional_path(cls, value: Any) -> Path | None:
        if value is None or value == "":
            return None
        return Path(value)

    @field_validator("base_url")
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("link_prefix")
    def _normalize_prefix(cls, value: str) -> str:
        text = value.strip().strip("/")
        return f"/{text}" if text else ""


def production_from_environment(default: bool) -> bool:
    """Resolve the production flag from ``BADNESS_ENV`` when it is set."""
    raw = os.environ.get(ENVIRONMENT_VARIABLE)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() == "production"


def load_config(path: str | Path) -> SiteConfig:
    """Load site configuration and resolve relative paths against its location.

    ``path`` may name a YAML file or a directory. A directory without a
    ``badness.yml`` yields the defaults anchored to that directory.
    """
    candidate = Path(path)
    data: dict[str, Any] = {}
    if candidate.is_dir():
        config_file = candidate / CONFIG_FILENAME
        if config_file.exists():
            with config_file.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        base_dir = candidate.resolve()
    else:
        if not candidate.exists():
            raise FileNotFoundError(candidate)
        with candidate.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        base_dir = candidate.parent.resolve()

    if not isinstance(data, dict):
        raise ValueError(f"Configuration {candidate} must define a mapping at its root.")

    cfg = SiteConfig(**data)
    cfg.production = production_from_environment(cfg.production)

    def _abs(value: Path) -> Path:
        return value if value.is_absolute() else (base_dir / value).resolve()

    cfg.output_dir = _abs(cfg.output_dir)
    cfg.stylesheet_path = _abs(cfg.stylesheet_path)
    if cfg.templates_dir is not None:
        cfg.templates_dir = _abs(cfg.templates_dir)
    return cfg
