"""Permalink computation from page metadata and permalink patterns.

Patterns use ``:name`` placeholders (``/:collection/:path:output_ext``).
The named styles follow Jekyll's built-in permalink styles.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sitesmith.domain.page import Page

PERMALINK_STYLES: dict[str, str] = {
    "date": "/:categories/:year/:month/:day/:title:output_ext",
    "pretty": "/:categories/:year/:month/:day/:title/",
    "ordinal": "/:categories/:year/:y_day/:title:output_ext",
    "none": "/:categories/:title:output_ext",
}

DEFAULT_COLLECTION_PERMALINK = "/:collection/:path:output_ext"
DEFAULT_MARKDOWN_EXT = ("markdown", "mkdown", "mkdn", "mkd", "md")

_PLACEHOLDER_RE = re.compile(r":([a-z_]+)")
_DATE_PREFIX_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})-(.*)$")


class PermalinkError(ValueError):
    """A permalink pattern could not be expanded for a page."""


@dataclass(frozen=True)
class PermalinkContext:
    """Site and collection settings consulted when a page's permalink is set.

    Attributes:
        style: Site-wide permalink style name or pattern; applies to the
            ``posts`` collection when it has no pattern of its own.
        collection_pattern: The owning collection's ``permalink`` setting.
        markdown_ext: Extensions (without the dot) rendered to ``.html``.
    """

    style: str = "date"
    collection_pattern: str | None = None
    markdown_ext: tuple[str, ...] = DEFAULT_MARKDOWN_EXT


def is_markdown(relpath: str, markdown_ext: tuple[str, ...] = DEFAULT_MARKDOWN_EXT) -> bool:
    """Whether *relpath* has one of the markdown extensions."""
    return PurePosixPath(relpath).suffix.lstrip(".").lower() in markdown_ext


def output_ext(relpath: str, markdown_ext: tuple[str, ...] = DEFAULT_MARKDOWN_EXT) -> str:
    """Return the extension of the rendered output for *relpath*."""
    if is_markdown(relpath, markdown_ext):
        return ".html"
    return PurePosixPath(relpath).suffix


def slugify(text: str) -> str:
    """Lowercase *text* and join its alphanumeric runs with hyphens."""
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def expand_pattern(pattern: str, values: dict[str, str]) -> str:
    """Substitute ``:name`` placeholders in *pattern* from *values*.

    Text after a colon that names no placeholder is kept as written, so
    ``/notes:archive/`` expands to itself.

    Raises:
        PermalinkError: If the expanded URL has a ``..`` segment.
    """

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        # Longest known prefix wins, so ":title:output_ext" and ":titlefoo" both parse.
        for end in range(len(name), 0, -1):
            if name[:end] in values:
                return values[name[:end]] + name[end:]
        return match.group(0)

    url = _PLACEHOLDER_RE.sub(replace, pattern)
    url = re.sub(r"/{2,}", "/", url)
    if not url.startswith("/"):
        url = "/" + url
    if ".." in url.split("/"):
        msg = f"permalink {url!r} from {pattern!r} leaves the destination directory"
        raise PermalinkError(msg)
    return url


def _collection_relpath(page: Page) -> str:
    """Path of *page* inside its collection directory."""
    parts = PurePosixPath(page.relpath).parts
    if page.collection and parts and parts[0] == f"_{page.collection}":
        return str(PurePosixPath(*parts[1:]))
    return page.relpath


def _page_date(page: Page, filename_date: date | None) -> date:
    value = page.front_matter.get("date")
    if isinstance(value, (date, datetime)):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            pass
    if filename_date is not None:
        return filename_date
    return page.modified


def placeholder_values(page: Page, context: PermalinkContext) -> dict[str, str]:
    """Return the values available to a permalink pattern for *page*."""
    inner = _collection_relpath(page)
    stem = PurePosixPath(inner).stem
    path_no_ext = str(PurePosixPath(inner).with_suffix("")) if stem else inner

    title = stem
    filename_date: date | None = None
    dated = _DATE_PREFIX_RE.match(stem)
    if dated:
        year, month, day, title = dated.groups()
        filename_date = date(int(year), int(month), int(day))
    slug = page.front_matter.get("slug")
    if isinstance(slug, str) and slug:
        title = slug

    when = _page_date(page, filename_date)
    return {
        "collection": page.collection or "",
        "path": path_no_ext,
        "name": stem,
        "title": title,
        "slug": slugify(title),
        "output_ext": output_ext(page.relpath, context.markdown_ext),
        "categories": "/".join(page.front_matter.sorted_string_list("categories")),
        "year": f"{when.year:04d}",
        "month": f"{when.month:02d}",
        "day": f"{when.day:02d}",
        "i_month": str(when.month),
        "i_day": str(when.day),
        "y_day": f"{when.timetuple().tm_yday:03d}",
    }


def _pattern_for(page: Page, context: PermalinkContext) -> str | None:
    explicit = page.front_matter.get("permalink")
    if isinstance(explicit, str) and explicit:
        return PERMALINK_STYLES.get(explicit, explicit)
    if page.collection is None:
        return None
    if context.collection_pattern:
        return PERMALINK_STYLES.get(context.collection_pattern, context.collection_pattern)
    if page.collection == "posts":
        return PERMALINK_STYLES.get(context.style, context.style)
    return DEFAULT_COLLECTION_PERMALINK


def compute_permalink(page: Page, context: PermalinkContext) -> str:
    """Return the output URL path for *page*.

    Static files keep their source path (collection files are moved under
    ``/<collection>/``). Dynamic pages use their ``permalink`` front
    matter, then the collection pattern, then their source path with the
    output extension. A rendered ``index.html`` maps to its directory.

    Raises:
        PermalinkError: If the expanded URL has a ``..`` segment.
    """
    if page.static:
        if page.collection is not None:
            return f"/{page.collection}/{_collection_relpath(page)}"
        return "/" + page.relpath

    pattern = _pattern_for(page, context)
    if pattern is not None:
        return expand_pattern(pattern, placeholder_values(page, context))

    source = PurePosixPath(page.relpath)
    url = "/" + str(source.with_suffix(output_ext(page.relpath, context.markdown_ext)))
    if url == "/index.html" or url.endswith("/index.html"):
        return url[: -len("index.html")]
    return url
