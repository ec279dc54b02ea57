from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest

from badness.content import FrontMatterError, load_post


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_load_post_reads_front_matter_and_renders_markdown(tmp_path: Path) -> None:
    source = _write(
        tmp_path / "2017-05-07-monads.md",
        (
            "---\n"
            "title: Escaping Hell with Monads\n"
            "date: 2017-05-07\n"
            "path: /escaping-hell-with-monads/\n"
            "---\n"
            "Some *emphasis* here.\n"
            "\n"
            "| a | b |\n"
            "|---|---|\n"
            "| 1 | 2 |\n"
        ),
    )

    post = load_post(source)

    assert post.title == "Escaping Hell with Monads"
    assert post.date == dt.date(2017, 5, 7)
    assert post.path == "/escaping-hell-with-monads/"
    assert "<em>emphasis</em>" in post.body
    assert "<table>" in post.body


def test_load_post_defaults_path_to_file_stem(tmp_path: Path) -> None:
    source = _write(tmp_path / "hello.md", "---\ntitle: Hello\ndate: 2016-01-02\n---\nHi.\n")
    assert load_post(source).path == "/hello/"


def test_load_post_keeps_inline_html(tmp_path: Path) -> None:
    source = _write(
        tmp_path / "math.md",
        '---\ntitle: Math\ndate: 2016-01-02\n---\n<div class="math">$$x$$</div>\n',
    )
    assert '<div class="math">$$x$$</div>' in load_post(source).body


def test_load_post_requires_title(tmp_path: Path) -> None:
    source = _write(tmp_path / "untitled.md", "---\ndate: 2016-01-02\n---\nBody\n")
    with pytest.raises(FrontMatterError):
        load_post(source)


def test_load_post_requires_front_matter(tmp_path: Path) -> None:
    source = _write(tmp_path / "plain.md", "# Just markdown\n")
    with pytest.raises(FrontMatterError):
        load_post(source)


def test_load_post_rejects_unclosed_front_matter(tmp_path: Path) -> None:
    source = _write(tmp_path / "open.md", "---\ntitle: Open\ndate: 2016-01-02\nBody\n")
    with pytest.raises(FrontMatterError, match="missing"):
        load_post(source)


def test_load_post_rejects_non_mapping_front_matter(tmp_path: Path) -> None:
    source = _write(tmp_path / "list.md", "---\n- a\n- b\n---\nBody\n")
    with pytest.raises(FrontMatterError, match="mapping"):
        load_post(source)
