"""Jinja2 rendering of dynamic pages, with mistune for markdown bodies."""

from __future__ import annotations

from pathlib import Path
from typing import IO, Any

import mistune
from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader

from sitesmith.domain.frontmatter import read_front_matter
from sitesmith.domain.page import Page, PageKind, template_object, write_static
from sitesmith.domain.permalinks import DEFAULT_MARKDOWN_EXT, is_markdown

LAYOUTS_DIR = "_layouts"
INCLUDES_DIR = "_includes"

# Guard against layouts that name each other in a cycle.
_MAX_LAYOUT_DEPTH = 20


class LayoutError(LookupError):
    """A page names a layout that does not exist or nests too deeply."""


def build_template_environment(source: Path) -> Environment:
    """Build a Jinja2 environment over the site's layouts and includes.

    ``{% include "nav.html" %}`` resolves against ``_includes/`` and
    layouts are looked up in ``_layouts/``.
    """
    loaders: list[BaseLoader] = [
        FileSystemLoader(str(source / INCLUDES_DIR)),
        FileSystemLoader(str(source / LAYOUTS_DIR)),
    ]
    env = Environment(loader=ChoiceLoader(loaders), keep_trailing_newline=True)
    env.filters["markdownify"] = _new_markdown()
    return env


def _new_markdown() -> mistune.Markdown:
    return mistune.create_markdown(plugins=["table", "strikethrough", "footnotes"])


def _load_layout(source: Path, name: str) -> tuple[dict[str, Any], str]:
    """Return the front matter and body of layout *name*."""
    path = source / LAYOUTS_DIR / f"{name}.html"
    if not path.is_file():
        msg = f"layout {name!r} not found in {LAYOUTS_DIR}/"
        raise LayoutError(msg)
    fm, body = read_front_matter(path)
    return (fm.to_dict() if fm is not None else {}), body


def render_page(
    page: Page,
    site_vars: dict[str, Any],
    *,
    env: Environment,
    markdown_ext: tuple[str, ...] = DEFAULT_MARKDOWN_EXT,
) -> str:
    """Render a dynamic page's body, convert markdown, and apply its layouts."""
    if page.kind is not PageKind.DYNAMIC:
        msg = f"{page.relpath} is a static page and has nothing to render"
        raise TypeError(msg)

    page_vars = template_object(page)
    content = env.from_string(page.body).render(page=page_vars, site=site_vars)
    if is_markdown(page.relpath, markdown_ext):
        content = _new_markdown()(content)

    layout = page.front_matter.get("layout")
    depth = 0
    while isinstance(layout, str) and layout:
        depth += 1
        if depth > _MAX_LAYOUT_DEPTH:
            msg = f"layouts nested more than {_MAX_LAYOUT_DEPTH} deep in {page.relpath}"
            raise LayoutError(msg)
        layout_fm, layout_body = _load_layout(page.source_root, layout)
        content = env.from_string(layout_body).render(
            page=page_vars,
            site=site_vars,
            layout=layout_fm,
            content=content,
        )
        layout = layout_fm.get("layout")
    return content


def write_page(
    page: Page,
    stream: IO[bytes],
    site_vars: dict[str, Any],
    *,
    env: Environment,
    markdown_ext: tuple[str, ...] = DEFAULT_MARKDOWN_EXT,
) -> None:
    """Write *page*'s output to *stream*."""
    match page.kind:
        case PageKind.STATIC:
            write_static(page, stream)
        case PageKind.DYNAMIC:
            text = render_page(page, site_vars, env=env, markdown_ext=markdown_ext)
            stream.write(text.encode("utf-8"))
