"""BaseService — shared foundation for sitesmith services.

Every service receives a :class:`Site`. Services read the site lazily and
turn the exceptions raised by the domain and infrastructure layers into
failed :class:`ServiceResult` values.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from jinja2 import TemplateError

from sitesmith.domain.permalinks import PermalinkError
from sitesmith.infrastructure.filesystem import PathError, new_path_error
from sitesmith.infrastructure.templates import LayoutError
from sitesmith.services.result import ErrorCode, ServiceError, ServiceResult

if TYPE_CHECKING:
    from sitesmith.services.site import Site

logger = structlog.get_logger(__name__)

# Exceptions that describe a problem with the site rather than a bug.
SITE_ERRORS = (PathError, PermalinkError, LayoutError, TemplateError)


def _error_code(exc: BaseException) -> str:
    if isinstance(exc, PathError):
        if isinstance(exc.cause, FileNotFoundError):
            return ErrorCode.NOT_FOUND
        return ErrorCode.IO_ERROR
    if isinstance(exc, PermalinkError):
        return ErrorCode.INVALID_PERMALINK
    if isinstance(exc, LayoutError):
        return ErrorCode.LAYOUT_ERROR
    return ErrorCode.TEMPLATE_ERROR


def error_result(
    op: str,
    exc: BaseException,
    warnings: list[str] | None = None,
    *,
    code: str | None = None,
) -> ServiceResult:
    """Build a failed ServiceResult from a site error.

    The error code is derived from the exception type unless *code* is given.
    """
    detail: dict[str, str] = {}
    if isinstance(exc, PathError):
        detail = {"op": exc.op, "path": exc.path}
    code = code or _error_code(exc)
    logger.debug("service failed", op=op, code=code, exc_info=exc)
    return ServiceResult(
        ok=False,
        op=op,
        warnings=warnings or [],
        error=ServiceError(code=code, message=str(exc), detail=detail),
    )


class BaseService:
    """Base for service-layer classes operating on one site.

    Usage::

        class BuildService(BaseService):
            def build(self) -> ServiceResult:
                warnings = self._ensure_read()
                ...
    """

    def __init__(self, site: Site) -> None:
        self._site = site

    def _destination_error(self, op: str) -> ServiceResult | None:
        """Refuse a destination that would put source files up for removal."""
        site = self._site
        if not site.destination_overlaps_source():
            return None
        exc = new_path_error(op, site.destination, f"destination contains the source {site.source}")
        return error_result(op, exc, code=ErrorCode.INVALID_DESTINATION)

    def _ensure_read(self) -> list[str]:
        """Read the site's files unless they were already read."""
        if self._site.loaded:
            return []
        return self._site.read_files()
