"""Site — owner of every page, the collection registry, and the route table.

Pages refer to their collection by name only; the Site is the single
owner and resolves names through :attr:`Site.collections`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Any

import structlog

from sitesmith.config.discovery import CONFIG_FILENAME
from sitesmith.domain.frontmatter import FrontMatter
from sitesmith.domain.page import Page, read_page, template_object
from sitesmith.domain.permalinks import PermalinkContext
from sitesmith.infrastructure.templates import INCLUDES_DIR, LAYOUTS_DIR, build_template_environment

if TYPE_CHECKING:
    from jinja2 import Environment

    from sitesmith.config.settings import SiteSettings

logger = structlog.get_logger(__name__)

_ALWAYS_SKIPPED = frozenset({LAYOUTS_DIR, INCLUDES_DIR})


@dataclass
class Collection:
    """A named group of pages stored under ``_<name>/``."""

    name: str
    output: bool = True
    permalink: str | None = None
    relpaths: list[str] = field(default_factory=list)

    @property
    def directory(self) -> str:
        return f"_{self.name}"


class Site:
    """A site source tree and everything read from it."""

    def __init__(self, settings: SiteSettings) -> None:
        self.settings = settings
        self.source = settings.source
        self.destination = settings.destination_dir
        self.collections: dict[str, Collection] = {
            name: Collection(name, output=cfg.output, permalink=cfg.permalink)
            for name, cfg in settings.collections.items()
        }
        self.collections.setdefault("posts", Collection("posts"))
        self.pages: list[Page] = []
        self.routes: dict[str, Page] = {}
        self.loaded = False
        self._env: Environment | None = None

    def __repr__(self) -> str:
        return f"Site(source={str(self.source)!r}, pages={len(self.pages)})"

    @property
    def markdown_ext(self) -> tuple[str, ...]:
        return self.settings.site.markdown_extensions()

    @property
    def template_environment(self) -> Environment:
        """The Jinja2 environment (created lazily on first access)."""
        if self._env is None:
            self._env = build_template_environment(self.source)
        return self._env

    # --- Reading ---

    def read_files(self) -> list[str]:
        """Read every page under the source tree and build the route table.

        Returns warnings (currently: permalinks claimed by more than one
        file). I/O and permalink errors propagate; nothing is kept from a
        failed read.
        """
        pages: list[Page] = []
        for relpath in self._source_relpaths():
            pages.append(self._read(relpath))

        for collection in self.collections.values():
            collection.relpaths = [p.relpath for p in pages if p.collection == collection.name]

        warnings: list[str] = []
        routes: dict[str, Page] = {}
        for page in pages:
            if not self._routable(page):
                continue
            existing = routes.get(page.permalink)
            if existing is not None:
                msg = f"{page.relpath} and {existing.relpath} both map to {page.permalink}"
                logger.warning("duplicate permalink", url=page.permalink, path=page.relpath)
                warnings.append(msg)
            routes[page.permalink] = page

        self.pages = pages
        self.routes = routes
        self.loaded = True
        logger.debug("site read", pages=len(pages), routes=len(routes))
        return warnings

    def _read(self, relpath: str) -> Page:
        collection = self._collection_for(relpath)
        cfg = self.collections[collection] if collection else None
        context = PermalinkContext(
            style=self.settings.site.permalink,
            collection_pattern=cfg.permalink if cfg else None,
            markdown_ext=self.markdown_ext,
        )
        return read_page(
            self.source,
            relpath,
            self.defaults_for(relpath, collection),
            collection=collection,
            permalink=context,
        )

    def _routable(self, page: Page) -> bool:
        if not page.published:
            return False
        if page.collection is not None and not self.collections[page.collection].output:
            return False
        return True

    def _collection_for(self, relpath: str) -> str | None:
        top = PurePosixPath(relpath).parts[0]
        for collection in self.collections.values():
            if top == collection.directory:
                return collection.name
        return None

    def defaults_for(self, relpath: str, collection: str | None) -> FrontMatter:
        """Front matter defaults that apply to *relpath*, later entries winning."""
        fm = FrontMatter()
        for entry in self.settings.defaults:
            if entry.matches(relpath, collection):
                fm = fm.merged(entry.values)
        return fm

    def _skipped(self, relpath: str) -> bool:
        """Whether *relpath* (a file or directory) is left out of the site."""
        site_cfg = self.settings.site
        for entry in site_cfg.include:
            entry = entry.strip("/")
            if relpath == entry or relpath.startswith(entry + "/"):
                return False
        for entry in site_cfg.exclude:
            entry = entry.strip("/")
            if relpath == entry or relpath.startswith(entry + "/"):
                return True

        name = PurePosixPath(relpath).name
        if relpath in _ALWAYS_SKIPPED or relpath == CONFIG_FILENAME:
            return True
        if "/" not in relpath and any(name == c.directory for c in self.collections.values()):
            return False
        return name.startswith((".", "_", "#")) or name.endswith("~")

    def _source_relpaths(self) -> list[str]:
        destination = self.destination.resolve()
        found: list[str] = []
        for dirpath, dirnames, filenames in os.walk(self.source):
            current = Path(dirpath)
            rel_dir = current.relative_to(self.source).as_posix()
            prefix = "" if rel_dir == "." else rel_dir + "/"

            kept: list[str] = []
            for name in sorted(dirnames):
                child = current / name
                if child.resolve() == destination or self._skipped(prefix + name):
                    continue
                kept.append(name)
            dirnames[:] = kept

            for name in sorted(filenames):
                if not self._skipped(prefix + name):
                    found.append(prefix + name)
        return found

    # --- Lookup ---

    def page_for_url(self, url: str) -> Page | None:
        """Return the routed page for a URL path, or None."""
        candidates = [url]
        if url.endswith("/index.html"):
            candidates.append(url[: -len("index.html")])
        elif not url.endswith("/"):
            candidates.append(url + "/")
        for candidate in candidates:
            if candidate in self.routes:
                return self.routes[candidate]
        return None

    def find_page_by_file_path(self, relpath: str) -> Page | None:
        """Return the page read from *relpath*, published or not."""
        wanted = PurePosixPath(relpath.replace("\\", "/")).as_posix()
        for page in self.pages:
            if page.relpath == wanted:
                return page
        return None

    def destination_overlaps_source(self) -> bool:
        """Whether the destination is the source directory or one of its parents."""
        source = self.source.resolve()
        destination = self.destination.resolve()
        return destination == source or destination in source.parents

    def output_path(self, url: str) -> Path:
        """Return the destination file written for a route."""
        rel = url.lstrip("/")
        if not rel or rel.endswith("/"):
            rel += "index.html"
        return self.destination.joinpath(*PurePosixPath(rel).parts)

    def variables(self) -> dict[str, Any]:
        """Return the ``site`` variable exposed to templates."""
        site_cfg = self.settings.site
        routed = set(map(id, self.routes.values()))
        data: dict[str, Any] = {
            "title": site_cfg.title,
            "url": site_cfg.url,
            "baseurl": site_cfg.baseurl,
            "time": datetime.now(UTC),
            "pages": [
                template_object(p)
                for p in self.pages
                if p.collection is None and not p.static and id(p) in routed
            ],
            "static_files": [template_object(p) for p in self.pages if p.static],
            "collections": [
                {"label": c.name, "output": c.output, "files": list(c.relpaths)}
                for c in self.collections.values()
            ],
        }
        for collection in self.collections.values():
            data[collection.name] = [
                template_object(p)
                for p in self.pages
                if p.collection == collection.name and id(p) in routed
            ]
        return data
