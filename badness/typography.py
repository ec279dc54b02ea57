"""Typography settings shared by every rendered page.

The theme sets type on a vertical rhythm: every block margin is a multiple of
the base line height, and heading sizes follow a modular scale derived from
``scale_ratio``. ``Typography`` turns a frozen option set into CSS rules, the
Google Fonts link, and the rhythm/scale helpers the templates use for layout
constants.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Protocol

from markupsafe import Markup
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

GOOGLE_FONTS_URL = "//fonts.googleapis.com/css"
GENERIC_FAMILIES = frozenset({"serif", "sans-serif", "monospace", "cursive", "fantasy", "system-ui"})
ROOT_FONT_SIZE_PX = 16.0

# Modular scale steps for h1..h6.
HEADING_SCALE: tuple[tuple[str, float], ...] = (
    ("h1", 5 / 5),
    ("h2", 3 / 5),
    ("h3", 2 / 5),
    ("h4", 0 / 5),
    ("h5", -1 / 5),
    ("h6", -1.5 / 5),
)

CssRules = dict[str, dict[str, str]]


class TypographyError(ValueError):
    """Raised when typography options cannot be turned into styles."""


class GoogleFont(BaseModel):
    """A Google Fonts family and the styles to request for it."""

    model_config = ConfigDict(frozen=True)

    name: str
    styles: tuple[str, ...] = Field(default=("400",))


class TypographyOptions(BaseModel):
    """Frozen option set a ``Typography`` is built from."""

    model_config = ConfigDict(frozen=True)

    google_fonts: tuple[GoogleFont, ...] = Field(
        default=(
            GoogleFont(name="Patua One", styles=("400",)),
            GoogleFont(name="Alegreya", styles=("400", "400i", "700")),
        )
    )
    header_font_family: tuple[str, ...] = Field(default=("Patua One", "serif"))
    body_font_family: tuple[str, ...] = Field(default=("Alegreya", "serif"))
    base_font_size: str = Field(default="20px")
    base_line_height: float = Field(default=1.65, gt=0)
    scale_ratio: float = Field(default=2.25, gt=0)
    header_weight: str = Field(default="bold")
    body_weight: str = Field(default="normal")
    body_color: str = Field(default="hsla(0,0%,0%,0.8)")
    plugins: tuple[str, ...] = Field(default=("code",))

    @field_validator("base_font_size")
    def _require_pixels(cls, value: str) -> str:
        text = value.strip()
        if not text.endswith("px"):
            raise ValueError("base_font_size must be given in pixels, e.g. '20px'.")
        try:
            float(text[:-2])
        except ValueError:
            raise ValueError(f"base_font_size '{value}' is not a pixel length.") from None
        return text

    @property
    def base_font_size_px(self) -> float:
        return float(self.base_font_size[:-2])


DEFAULT_TYPOGRAPHY_OPTIONS = TypographyOptions()


@dataclass(frozen=True, slots=True)
class FontScale:
    """Font size and matching line height for one step of the modular scale."""

    font_size: str
    line_height: str


class LiveDocument(Protocol):
    """A document that is currently displayed and can take extra head markup."""

    def insert_head_html(self, markup: str) -> None: ...


def _number(value: float) -> str:
    return f"{value:.4f}".rstrip("0").rstrip(".")


def _rem(value: float) -> str:
    return f"{_number(value)}rem"


def _font_stack(families: tuple[str, ...]) -> str:
    quoted: list[str] = []
    for family in families:
        name = family.strip().strip("'\"")
        if name.lower() in GENERIC_FAMILIES:
            quoted.append(name)
        else:
            quoted.append(f"'{name}'")
    return ",".join(quoted)


def _code_plugin(typography: "Typography") -> CssRules:
    return {
        "tt,code": {
            "font-family": (
                '"SFMono-Regular",Consolas,"Roboto Mono","Droid Sans Mono",'
                '"Liberation Mono",Menlo,Courier,monospace'
            ),
            "font-size": "85%",
        },
        "pre": {
            "line-height": "1.42",
            "overflow": "auto",
        },
        "pre code": {
            "font-size": "inherit",
            "line-height": "inherit",
        },
        "tt:before,tt:after,code:before,code:after": {
            "letter-spacing": "-0.2em",
            "content": '"\\00a0"',
        },
        "pre code:before,pre code:after,pre tt:before,pre tt:after": {
            "content": '""',
        },
    }


PLUGINS: dict[str, Callable[["Typography"], CssRules]] = {
    "code": _code_plugin,
}


class Typography:
    """Immutable typography configuration built from ``TypographyOptions``."""

    __slots__ = ("_options",)

    def __init__(self, options: TypographyOptions = DEFAULT_TYPOGRAPHY_OPTIONS) -> None:
        unknown = [name for name in options.plugins if name not in PLUGINS]
        if unknown:
            raise TypographyError(f"Unknown typography plugin(s): {', '.join(unknown)}")
        self._options = options

    @property
    def options(self) -> TypographyOptions:
        return self._options

    def rhythm(self, lines: float) -> str:
        """Return ``lines`` multiples of the base line height as a rem length."""
        return _rem(lines * self._options.base_line_height)

    def scale(self, value: float) -> FontScale:
        """Font size ``scale_ratio ** value`` with a line height snapped to half rhythm lines."""
        base_line_height = self._options.base_line_height
        font_size = self._options.scale_ratio**value
        lines = math.ceil(2 * font_size / base_line_height) / 2
        line_height = lines * base_line_height / font_size
        return FontScale(font_size=_rem(font_size), line_height=_number(line_height))

    def rules(self) -> CssRules:
        opts = self._options
        block_margin = f"0 0 {self.rhythm(1)}"
        rules: CssRules = {
            "html": {
                "font": (
                    f"{_number(opts.base_font_size_px / ROOT_FONT_SIZE_PX * 100)}%/"
                    f"{_number(opts.base_line_height)} {_font_stack(opts.body_font_family)}"
                ),
                "box-sizing": "border-box",
                "overflow-y": "scroll",
            },
            "*,*:before,*:after": {"box-sizing": "inherit"},
            "body": {
                "color": opts.body_color,
                "font-family": _font_stack(opts.body_font_family),
                "font-weight": opts.body_weight,
                "word-wrap": "break-word",
                "font-kerning": "normal",
            },
            "img": {"max-width": "100%", "margin": block_margin, "padding": "0"},
        }
        for tag, step in HEADING_SCALE:
            size = self.scale(step)
            rules[tag] = {
                "margin": block_margin,
                "padding": "0",
                "color": "inherit",
                "font-family": _font_stack(opts.header_font_family),
                "font-weight": opts.header_weight,
                "text-rendering": "optimizeLegibility",
                "font-size": size.font_size,
                "line-height": size.line_height,
            }
        rules["ul,ol"] = {
            "margin": f"0 0 {self.rhythm(1)} {self.rhythm(1)}",
            "padding": "0",
            "list-style-position": "outside",
        }
        rules["p,pre,table,hr,dl,dd,figure,fieldset,form"] = {"margin": block_margin, "padding": "0"}
        rules["blockquote"] = {
            "margin": f"0 {self.rhythm(1)} {self.rhythm(1)}",
            "padding": "0",
        }
        rules["b,strong,dt,th"] = {"font-weight": "bold"}
        rules["hr"] = {
            "background": "hsla(0,0%,0%,0.2)",
            "border": "none",
            "height": "1px",
        }
        rules["table"] = {"width": "100%", "border-collapse": "collapse"}
        rules["th,td"] = {
            "text-align": "left",
            "border-bottom": "1px solid hsla(0,0%,0%,0.12)",
            "padding": f"{self.rhythm(1 / 2)} {self.rhythm(2 / 3)} calc({self.rhythm(1 / 2)} - 1px) 0",
        }
        rules["li>p,li *:last-child,blockquote *:last-child"] = {"margin-bottom": "0"}
        for name in opts.plugins:
            for selector, declarations in PLUGINS[name](self).items():
                rules.setdefault(selector, {}).update(declarations)
        return rules

    def create_styles(self) -> str:
        """Compile the typography rules to CSS text."""
        blocks: list[str] = []
        for selector, declarations in self.rules().items():
            body = ";".join(f"{prop}:{value}" for prop, value in declarations.items())
            blocks.append(f"{selector}{{{body};}}")
        return "".join(blocks)

    def google_font_href(self) -> str | None:
        fonts = self._options.google_fonts
        if not fonts:
            return None
        families = "|".join(
            f"{font.name.replace(' ', '+')}:{','.join(font.styles)}" for font in fonts
        )
        return f"{GOOGLE_FONTS_URL}?family={families}"

    def google_font_link(self) -> Markup:
        href = self.google_font_href()
        if href is None:
            return Markup("")
        return Markup('<link href="{}" rel="stylesheet" type="text/css">').format(href)

    def style_tag(self) -> Markup:
        return Markup('<style id="typography.js">') + Markup(self.create_styles()) + Markup("</style>")

    def inject_styles(self, document: LiveDocument) -> None:
        """Append the style tag and the font link to ``document``'s head."""
        document.insert_head_html(str(self.style_tag() + self.google_font_link()))


_shared: dict[TypographyOptions, Typography] = {}


def get_typography(
    options: TypographyOptions = DEFAULT_TYPOGRAPHY_OPTIONS,
    *,
    production: bool = False,
    document: LiveDocument | None = None,
) -> Typography:
    """Return the process-wide ``Typography`` for ``options``.

    The first call for an option set constructs it. Outside production builds,
    that first construction also injects the styles into ``document`` when a
    live document is given; later calls never inject again.
    """
    existing = _shared.get(options)
    if existing is not None:
        logger.debug("Reusing shared typography for %s", options.body_font_family)
        return existing

    typography = Typography(options)
    if not production and document is not None:
        typography.inject_styles(document)
    elif not production:
        logger.debug("No live document; skipping typography injection.")
    _shared[options] = typography
    return typography
