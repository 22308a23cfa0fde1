"""Tests for error_result — mapping site errors to ServiceError codes."""

from __future__ import annotations

import errno

from jinja2 import TemplateSyntaxError

from sitesmith.domain.permalinks import PermalinkError
from sitesmith.infrastructure.filesystem import PathError, new_path_error
from sitesmith.infrastructure.templates import LayoutError
from sitesmith.services.base import error_result


class TestErrorResult:
    def test_missing_file(self) -> None:
        exc = PathError("read", "a.md", FileNotFoundError(errno.ENOENT, "No such file"))
        result = error_result("build", exc)
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail == {"op": "read", "path": "a.md"}
        assert result.error.message == "read a.md: No such file"

    def test_other_io_error(self) -> None:
        exc = PathError("remove", "d", PermissionError(errno.EACCES, "Permission denied"))
        assert error_result("clean", exc).error.code == "IO_ERROR"  # type: ignore[union-attr]

    def test_explicit_code(self) -> None:
        exc = new_path_error("render", "/x", "no such page")
        assert error_result("render", exc, code="NOT_FOUND").error.code == "NOT_FOUND"  # type: ignore[union-attr]

    def test_permalink(self) -> None:
        result = error_result("build", PermalinkError("bad"))
        assert result.error is not None
        assert result.error.code == "INVALID_PERMALINK"
        assert result.error.detail == {}

    def test_layout(self) -> None:
        assert error_result("build", LayoutError("x")).error.code == "LAYOUT_ERROR"  # type: ignore[union-attr]

    def test_template(self) -> None:
        exc = TemplateSyntaxError("unexpected end", lineno=1)
        assert error_result("build", exc).error.code == "TEMPLATE_ERROR"  # type: ignore[union-attr]

    def test_warnings_kept(self) -> None:
        result = error_result("build", PermalinkError("bad"), ["w"])
        assert result.warnings == ["w"]
