from __future__ import annotations

from typing import Mapping

from markupsafe import Markup

from badness.config import CommentsConfig, SiteConfig
from badness.template import (
    CommentConfig,
    Route,
    comment_config_for,
    on_route_changed,
    render_page,
    resolve_comment_path,
)
from badness.typography import Typography

MOVED_POST = "/escaping-hell-with-monads/"
MOVED_POST_URL = "https://philipnilsson.github.io/Badness10k/posts/2017-05-07-escaping-hell-with-monads.html"


class _FakeHost:
    def __init__(self, *, math: bool = False, widget_loaded: bool = False) -> None:
        self.math = math
        self.widget_loaded = widget_loaded
        self.typeset_calls = 0
        self.configs: list[CommentConfig] = []
        self.resets: list[CommentConfig] = []
        self.scripts: list[tuple[str, dict[str, str]]] = []

    def math_available(self) -> bool:
        return self.math

    def typeset_math(self) -> None:
        self.typeset_calls += 1

    def set_comment_config(self, config: CommentConfig) -> None:
        self.configs.append(config)

    def comment_widget_loaded(self) -> bool:
        return self.widget_loaded

    def reset_comment_widget(self, config: CommentConfig) -> None:
        self.resets.append(config)

    def inject_script(self, src: str, attributes: Mapping[str, str]) -> None:
        self.scripts.append((src, dict(attributes)))


def _render(children: Markup, site: SiteConfig | None = None, route: Route | None = None) -> str:
    return str(render_page(children, site=site or SiteConfig(), typography=Typography(), route=route))


def test_page_includes_children_footer_and_empty_comment_mount() -> None:
    children = Markup('<article class="post">Hi &amp; <em>bye</em></article>')
    html = _render(children)

    assert str(children) in html
    assert '<div id="footer">' in html
    assert (
        '<a type="application/rss+xml" href="http://philipnilsson.github.io/Badness10k/atom.xml">'
        "RSS feed for this page</a>"
    ) in html
    assert 'class="twitter-follow-button" data-show-count="false" data-size="large"' in html
    assert "Follow @ali_pang" in html
    assert '<div id="disqus_thread"></div>' in html
    assert html.index(str(children)) < html.index('<div id="footer">') < html.index("disqus_thread")


def test_page_header_links_home_and_uses_rhythm() -> None:
    html = _render(Markup(""))

    assert '<h2 style="float: left;">Badness 10.000</h2>' in html
    assert '<a href="/" style="color: black; text-decoration: none;">' in html
    assert 'class="twitter-bird"' in html
    assert "background: #1244ee;" in html
    assert "margin-bottom: 1.65rem;" in html
    assert "padding: 0.825rem 1.2375rem;" in html


def test_page_home_link_is_prefixed_when_enabled() -> None:
    html = _render(Markup(""), site=SiteConfig(prefix_links=True))
    assert '<a href="/Badness10k/"' in html


def test_page_without_route_has_no_bootstrap_script() -> None:
    assert "<script>" not in _render(Markup("<p>x</p>"))


def test_page_with_route_carries_comment_settings() -> None:
    html = _render(Markup("<p>x</p>"), route=Route(pathname=MOVED_POST, title="Badness 10.000 | Monads"))

    assert "<script>" in html
    assert "window.disqus_config" in html
    assert MOVED_POST_URL in html
    assert "https://badness-10-000.disqus.com/embed.js" in html
    assert "Badness 10.000 | Monads" in html


def test_page_with_comments_disabled_only_typesets_math() -> None:
    site = SiteConfig(comments=CommentsConfig(enabled=False))
    html = _render(Markup("<p>x</p>"), site=site, route=Route(pathname="/a/", title="A"))

    assert "MathJax.Hub.Typeset" in html
    assert '"comments": null' in html
    assert "embed.js" not in html


def test_resolve_comment_path_remaps_only_the_listed_route() -> None:
    comments = CommentsConfig()
    assert resolve_comment_path(MOVED_POST, comments) == "/posts/2017-05-07-escaping-hell-with-monads.html"
    assert resolve_comment_path("/another-post/", comments) == "/another-post/"


def test_comment_config_uses_base_url_and_document_title() -> None:
    config = comment_config_for(Route(pathname="/another-post/", title="Doc Title"), SiteConfig())
    assert config == CommentConfig(
        page_url="https://philipnilsson.github.io/Badness10k/another-post/",
        page_identifier="Doc Title",
    )


def test_first_route_change_injects_comment_script() -> None:
    host = _FakeHost()
    on_route_changed(Route(pathname=MOVED_POST, title="Monads"), host, SiteConfig())

    assert host.typeset_calls == 0
    assert host.configs == [CommentConfig(page_url=MOVED_POST_URL, page_identifier="Monads")]
    assert host.resets == []
    assert len(host.scripts) == 1
    src, attributes = host.scripts[0]
    assert src == "https://badness-10-000.disqus.com/embed.js"
    assert attributes["data-timestamp"].isdigit()


def test_later_route_change_resets_loaded_widget_and_typesets_math() -> None:
    host = _FakeHost(math=True, widget_loaded=True)
    on_route_changed(Route(pathname="/b/", title="B"), host, SiteConfig())

    assert host.typeset_calls == 1
    assert host.resets == host.configs
    assert host.scripts == []


def test_route_change_with_comments_disabled_leaves_widget_alone() -> None:
    host = _FakeHost(math=True)
    site = SiteConfig(comments=CommentsConfig(enabled=False))
    on_route_changed(Route(pathname="/b/", title="B"), host, site)

    assert host.typeset_calls == 1
    assert host.configs == [] and host.scripts == [] and host.resets == []
