"""BuildService — write the route table to the destination and tidy it."""

from __future__ import annotations

import os
import time
from pathlib import Path

import structlog

from sitesmith.infrastructure.filesystem import (
    PathError,
    copy_file_contents,
    remove_empty_directories,
    visit_created_file,
)
from sitesmith.infrastructure.templates import write_page
from sitesmith.services.base import SITE_ERRORS, BaseService, error_result
from sitesmith.services.result import ServiceResult

logger = structlog.get_logger(__name__)


class BuildService(BaseService):
    """Render every routed page and remove output left by earlier builds."""

    def build(self, *, dry_run: bool = False) -> ServiceResult:
        """Write every route to the destination directory.

        With *dry_run*, nothing is written or removed; the result lists the
        files that would be.
        """
        op = "build"
        refused = self._destination_error(op)
        if refused is not None:
            return refused
        start = time.perf_counter()
        warnings: list[str] = []
        site = self._site
        try:
            warnings.extend(self._ensure_read())
            site_vars = site.variables()
            written: list[Path] = []
            for url in sorted(site.routes):
                page = site.routes[url]
                dest = site.output_path(url)
                written.append(dest)
                if dry_run:
                    continue
                if page.static:
                    copy_file_contents(dest, page.source_path)
                    logger.debug("copied file", url=url, path=page.relpath)
                    continue
                try:
                    dest.parent.mkdir(parents=True, exist_ok=True)
                except OSError as exc:
                    raise PathError("mkdir", dest.parent, exc) from exc
                visit_created_file(
                    dest,
                    lambda stream, page=page: write_page(
                        page,
                        stream,
                        site_vars,
                        env=site.template_environment,
                        markdown_ext=site.markdown_ext,
                    ),
                )
                logger.debug("wrote page", url=url, path=page.relpath)
            removed = self._remove_stale(written, dry_run=dry_run)
        except SITE_ERRORS as exc:
            return error_result(op, exc, warnings)

        data = {
            "count": len(written),
            "destination": str(site.destination),
            "removed": len(removed),
            "elapsed": round(time.perf_counter() - start, 3),
        }
        if dry_run:
            data["dry_run"] = True
            data["files"] = [str(p.relative_to(site.destination).as_posix()) for p in written]
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def clean(self) -> ServiceResult:
        """Remove destination files no route produces, then empty directories."""
        op = "clean"
        refused = self._destination_error(op)
        if refused is not None:
            return refused
        warnings: list[str] = []
        site = self._site
        try:
            warnings.extend(self._ensure_read())
            expected = [site.output_path(url) for url in site.routes]
            removed = self._remove_stale(expected, dry_run=False)
        except SITE_ERRORS as exc:
            return error_result(op, exc, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "destination": str(site.destination),
                "removed": len(removed),
                "files": removed,
            },
            warnings=warnings,
        )

    def _remove_stale(self, expected: list[Path], *, dry_run: bool) -> list[str]:
        """Delete files under the destination that are not in *expected*."""
        destination = self._site.destination
        if not destination.is_dir():
            return []
        keep = {p.resolve() for p in expected}
        removed: list[str] = []
        for dirpath, _dirnames, filenames in os.walk(destination):
            for name in filenames:
                path = Path(dirpath) / name
                if path.resolve() in keep:
                    continue
                removed.append(path.relative_to(destination).as_posix())
                if dry_run:
                    continue
                try:
                    path.unlink()
                except FileNotFoundError:
                    continue
                except OSError as exc:
                    raise PathError("remove", path, exc) from exc
        if not dry_run:
            remove_empty_directories(destination)
        if removed:
            logger.info("removed stale output", count=len(removed))
        return sorted(removed)
