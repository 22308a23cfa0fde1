"""Pages — source files classified as static assets or templated documents.

A file whose first line is ``---`` is a *dynamic* page: its front matter
is merged over the caller's defaults and its body is kept for rendering.
Anything else is a *static* page, copied byte-for-byte on output.

The kind is decided once by :func:`read_page` and never changes. The
permalink is set exactly once, after classification, so that permalink
patterns can read the merged front matter.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from pathlib import Path, PurePosixPath
from typing import IO, Any

from sitesmith.domain.frontmatter import FRONT_MATTER_MAGIC, FrontMatter, read_front_matter
from sitesmith.domain.permalinks import PermalinkContext, compute_permalink
from sitesmith.infrastructure.filesystem import PathError, read_file_magic


class PageKind(StrEnum):
    STATIC = "static"
    DYNAMIC = "dynamic"


class PermalinkNotInitializedError(RuntimeError):
    """A page's permalink was read before, or set after, initialization."""


@dataclass(frozen=True, eq=False)
class Page:
    """A source file under a site's source root.

    Attributes:
        kind: Static or dynamic; fixed at construction.
        source_root: Directory the relative path is resolved against.
        relpath: ``/``-separated path relative to *source_root*.
        modified: Last-modified time of the source file (UTC).
        front_matter: Defaults merged with the file's own front matter.
        collection: Name of the owning collection in the site's registry,
            or ``None`` for top-level files.
        body: Template source of a dynamic page; empty for static pages.
    """

    kind: PageKind
    source_root: Path
    relpath: str
    modified: datetime
    front_matter: FrontMatter = field(default_factory=FrontMatter)
    collection: str | None = None
    body: str = ""
    _permalink: str | None = field(default=None, init=False, repr=False)

    def __repr__(self) -> str:
        return f"Page(kind={self.kind.value}, path={self.relpath!r}, permalink={self._permalink!r})"

    @property
    def static(self) -> bool:
        return self.kind is PageKind.STATIC

    @property
    def source_path(self) -> Path:
        return self.source_root.joinpath(*PurePosixPath(self.relpath).parts)

    @property
    def published(self) -> bool:
        return self.front_matter.get_bool("published", True)

    @property
    def permalink(self) -> str:
        if self._permalink is None:
            msg = f"permalink of {self.relpath} read before initialization"
            raise PermalinkNotInitializedError(msg)
        return self._permalink

    @property
    def permalink_initialized(self) -> bool:
        return self._permalink is not None


def init_permalink(page: Page, context: PermalinkContext) -> None:
    """Compute and store *page*'s permalink. Only allowed once."""
    if page._permalink is not None:
        msg = f"permalink of {page.relpath} is already initialized"
        raise PermalinkNotInitializedError(msg)
    object.__setattr__(page, "_permalink", compute_permalink(page, context))


def read_page(
    source_root: Path,
    relpath: str,
    defaults: FrontMatter | None = None,
    *,
    collection: str | None = None,
    permalink: PermalinkContext | None = None,
) -> Page:
    """Read and classify the file at *relpath* under *source_root*.

    The returned page has its permalink initialized. An I/O error raises
    :class:`~sitesmith.infrastructure.filesystem.PathError`; an invalid
    permalink pattern raises
    :class:`~sitesmith.domain.permalinks.PermalinkError`.
    """
    relpath = PurePosixPath(relpath.replace("\\", "/")).as_posix()
    defaults = defaults if defaults is not None else FrontMatter()
    path = source_root.joinpath(*PurePosixPath(relpath).parts)

    magic = read_file_magic(path)
    try:
        info = path.stat()
    except OSError as exc:
        raise PathError("stat", path, exc) from exc

    fields: dict[str, Any] = {
        "source_root": source_root,
        "relpath": relpath,
        "modified": datetime.fromtimestamp(info.st_mtime, tz=UTC),
        "collection": collection,
    }
    if magic == FRONT_MATTER_MAGIC:
        parsed, body = read_front_matter(path)
        page = Page(
            kind=PageKind.DYNAMIC,
            front_matter=defaults.merged(parsed),
            body=body,
            **fields,
        )
    else:
        page = Page(kind=PageKind.STATIC, front_matter=defaults, **fields)

    init_permalink(page, permalink or PermalinkContext())
    return page


# ---------------------------------------------------------------------------
# Template-facing views
# ---------------------------------------------------------------------------


def _structural_variables(page: Page) -> dict[str, Any]:
    path = "/" + page.relpath
    name = PurePosixPath(path).name
    ext = PurePosixPath(name).suffix
    return {
        "path": path,
        "modified_time": page.modified,
        "name": name,
        "basename": name[: -len(ext)] if ext else name,
        "extname": ext,
    }


def template_object(page: Page) -> dict[str, Any]:
    """Return the ``page`` variable exposed to templates.

    See https://jekyllrb.com/docs/variables/#page-variables
    """
    structural = _structural_variables(page)
    match page.kind:
        case PageKind.STATIC:
            # Static assets may carry attributes (a caption, say) from defaults.
            return {**page.front_matter, **structural}
        case PageKind.DYNAMIC:
            return {
                **structural,
                "url": page.permalink,
                "front_matter": page.front_matter.to_dict(),
            }


def debug_variables(page: Page) -> dict[str, Any]:
    """Return the variables shown when inspecting a page.

    Dynamic pages also show their front matter keys at the top level,
    before rendering.
    """
    variables = template_object(page)
    match page.kind:
        case PageKind.STATIC:
            return variables
        case PageKind.DYNAMIC:
            return {**page.front_matter, **variables}


def write_static(page: Page, stream: IO[bytes]) -> None:
    """Copy the source bytes of a static page to *stream*."""
    if page.kind is not PageKind.STATIC:
        msg = f"{page.relpath} is a dynamic page and must be rendered"
        raise TypeError(msg)
    try:
        source = open(page.source_path, "rb")  # noqa: SIM115
    except OSError as exc:
        raise PathError("read", page.source_path, exc) from exc
    with source:
        shutil.copyfileobj(source, stream)
