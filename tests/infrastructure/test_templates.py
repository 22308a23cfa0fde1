"""Tests for Jinja2 page rendering."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from jinja2 import TemplateSyntaxError

from sitesmith.domain.frontmatter import FrontMatter
from sitesmith.domain.page import read_page
from sitesmith.infrastructure.templates import (
    LayoutError,
    build_template_environment,
    render_page,
    write_page,
)
from tests.conftest import write


@pytest.fixture
def source(tmp_path: Path) -> Path:
    write(tmp_path, "_layouts/base.html", "<html>{{ content }}</html>")
    write(tmp_path, "_layouts/post.html", "---\nlayout: base\n---\n<article>{{ content }}</article>")
    write(tmp_path, "_includes/note.html", "[note: {{ page.front_matter.title }}]")
    return tmp_path


class TestRenderPage:
    def test_plain_html_body(self, source: Path) -> None:
        write(source, "a.html", "---\ntitle: A\n---\n<h1>{{ page.front_matter.title }}</h1>")
        page = read_page(source, "a.html")
        env = build_template_environment(source)
        assert render_page(page, {}, env=env) == "<h1>A</h1>"

    def test_site_variables(self, source: Path) -> None:
        write(source, "a.html", "---\n---\n{{ site.title }}")
        page = read_page(source, "a.html")
        env = build_template_environment(source)
        assert render_page(page, {"title": "My Site"}, env=env) == "My Site"

    def test_markdown_converted(self, source: Path) -> None:
        write(source, "a.md", "---\n---\n# Heading\n\nSome *text*.\n")
        page = read_page(source, "a.md")
        html = render_page(page, {}, env=build_template_environment(source))
        assert "<h1>Heading</h1>" in html
        assert "<em>text</em>" in html

    def test_layout_chain(self, source: Path) -> None:
        write(source, "p.html", "---\nlayout: post\n---\nbody")
        page = read_page(source, "p.html")
        html = render_page(page, {}, env=build_template_environment(source))
        assert html == "<html><article>body</article></html>"

    def test_include(self, source: Path) -> None:
        write(source, "a.html", "---\ntitle: T\n---\n{% include 'note.html' %}")
        page = read_page(source, "a.html")
        html = render_page(page, {}, env=build_template_environment(source))
        assert html == "[note: T]"

    def test_missing_layout(self, source: Path) -> None:
        write(source, "a.html", "---\nlayout: nope\n---\nbody")
        page = read_page(source, "a.html")
        with pytest.raises(LayoutError, match="nope"):
            render_page(page, {}, env=build_template_environment(source))

    def test_layout_cycle(self, source: Path) -> None:
        write(source, "_layouts/loop.html", "---\nlayout: loop\n---\n{{ content }}")
        write(source, "a.html", "---\nlayout: loop\n---\nbody")
        page = read_page(source, "a.html")
        with pytest.raises(LayoutError, match="nested"):
            render_page(page, {}, env=build_template_environment(source))

    def test_layout_from_defaults(self, source: Path) -> None:
        write(source, "a.html", "---\n---\nx")
        page = read_page(source, "a.html", FrontMatter({"layout": "base"}))
        assert render_page(page, {}, env=build_template_environment(source)) == "<html>x</html>"

    def test_template_syntax_error(self, source: Path) -> None:
        write(source, "a.html", "---\n---\n{% if %}")
        page = read_page(source, "a.html")
        with pytest.raises(TemplateSyntaxError):
            render_page(page, {}, env=build_template_environment(source))

    def test_static_rejected(self, source: Path) -> None:
        write(source, "a.txt", "plain")
        with pytest.raises(TypeError):
            render_page(read_page(source, "a.txt"), {}, env=build_template_environment(source))


class TestWritePage:
    def test_static_copied_verbatim(self, source: Path) -> None:
        write(source, "raw.txt", "{{ not a template }}")
        out = io.BytesIO()
        write_page(read_page(source, "raw.txt"), out, {}, env=build_template_environment(source))
        assert out.getvalue() == b"{{ not a template }}"

    def test_dynamic_rendered_utf8(self, source: Path) -> None:
        write(source, "a.html", "---\ntitle: Café\n---\n{{ page.front_matter.title }}")
        out = io.BytesIO()
        write_page(read_page(source, "a.html"), out, {}, env=build_template_environment(source))
        assert out.getvalue() == "Café".encode()
