"""InspectService — look up pages by URL or path and show how they render."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sitesmith.domain.page import debug_variables
from sitesmith.infrastructure.filesystem import PathError, new_path_error
from sitesmith.infrastructure.templates import render_page
from sitesmith.services.base import SITE_ERRORS, BaseService, error_result
from sitesmith.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from sitesmith.domain.page import Page


class InspectService(BaseService):
    """Read-only queries over a site's pages and routes.

    A *target* starting with ``/`` is a URL path; anything else is a file
    path relative to the site source.
    """

    def routes(self, *, dynamic_only: bool = False) -> ServiceResult:
        """List the route table, sorted by URL."""
        op = "routes"
        try:
            warnings = self._ensure_read()
        except SITE_ERRORS as exc:
            return error_result(op, exc)
        items = [
            {"url": url, "path": page.relpath, "kind": page.kind.value}
            for url, page in sorted(self._site.routes.items())
            if not (dynamic_only and page.static)
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={"count": len(items), "items": items},
            warnings=warnings,
        )

    def variables(self, target: str = "/") -> ServiceResult:
        """Return a page's debug variables, before rendering."""
        op = "variables"
        try:
            warnings = self._ensure_read()
        except SITE_ERRORS as exc:
            return error_result(op, exc)
        page = self._lookup(target)
        if page is None:
            return _not_found(op, target)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": page.relpath,
                "url": page.permalink,
                "variables": _plain(debug_variables(page)),
            },
            warnings=warnings,
        )

    def render(self, target: str = "/") -> ServiceResult:
        """Render a page to text. Static pages are decoded as UTF-8."""
        op = "render"
        site = self._site
        try:
            warnings = self._ensure_read()
            page = self._lookup(target)
            if page is None:
                return _not_found(op, target)
            if page.static:
                content = _read_text(page)
            else:
                content = render_page(
                    page,
                    site.variables(),
                    env=site.template_environment,
                    markdown_ext=site.markdown_ext,
                )
        except SITE_ERRORS as exc:
            return error_result(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": page.relpath,
                "source": str(page.source_path),
                "url": page.permalink,
                "content": content,
            },
            warnings=warnings,
        )

    def _lookup(self, target: str) -> Page | None:
        if target.startswith("/"):
            return self._site.page_for_url(target)
        return self._site.find_page_by_file_path(target)


def _read_text(page: Page) -> str:
    try:
        raw = page.source_path.read_bytes()
    except OSError as exc:
        raise PathError("read", page.source_path, exc) from exc
    return raw.decode("utf-8", errors="replace")


def _not_found(op: str, target: str) -> ServiceResult:
    if target.startswith("/"):
        text = "the site does not include a file with this URL path"
    else:
        text = "no such file"
    return error_result(op, new_path_error(op, target, text), code=ErrorCode.NOT_FOUND)


def _plain(value: Any) -> Any:
    """Convert mappings and sequences to plain dicts and lists for output."""
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
