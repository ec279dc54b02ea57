"""Per-render registry for document title and meta tags."""

from __future__ import annotations

from dataclasses import dataclass, field

from markupsafe import Markup


@dataclass(frozen=True, slots=True)
class MetaTag:
    name: str
    content: str

    def to_markup(self) -> Markup:
        return Markup('<meta name="{}" content="{}">').format(self.name, self.content)


@dataclass(frozen=True, slots=True)
class HeadSnapshot:
    """Head entries collected while rendering one page."""

    title: str | None = None
    meta: tuple[MetaTag, ...] = ()

    def title_markup(self) -> Markup:
        if self.title is None:
            return Markup("")
        return Markup("<title>{}</title>").format(self.title)

    def meta_markup(self) -> Markup:
        return Markup("").join(tag.to_markup() for tag in self.meta)


@dataclass(slots=True)
class HeadMetadata:
    """Collect title and meta tags from whatever page is being rendered.

    The last title set wins, so nested components can refine the title set by
    an outer layout. ``rewind`` hands the collected entries to the document
    shell and clears the registry for the next render.
    """

    title: str | None = None
    meta: list[MetaTag] = field(default_factory=list)

    def set_title(self, title: str) -> None:
        self.title = title

    def add_meta(self, name: str, content: str) -> None:
        self.meta.append(MetaTag(name=name, content=content))

    def rewind(self) -> HeadSnapshot:
        snapshot = HeadSnapshot(title=self.title, meta=tuple(self.meta))
        self.title = None
        self.meta = []
        return snapshot
