"""Tests for ServiceResult and ServiceError."""

import json

import pytest

from sitesmith.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="build", data={"count": 3})
        assert result.ok is True
        assert result.op == "build"
        assert result.data == {"count": 3}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_error_construction(self) -> None:
        error = ServiceError(code="NOT_FOUND", message="render /x: no such file")
        result = ServiceResult(ok=False, op="render", error=error)
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail == {}

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="build")
        with pytest.raises(Exception):
            result.ok = False  # type: ignore[misc]

    def test_json_round_trip(self) -> None:
        result = ServiceResult(
            ok=False,
            op="build",
            warnings=["duplicate permalink"],
            error=ServiceError(code="IO_ERROR", message="m", detail={"op": "read", "path": "a"}),
        )
        parsed = json.loads(result.model_dump_json())
        assert parsed["error"]["detail"] == {"op": "read", "path": "a"}
        assert parsed["warnings"] == ["duplicate permalink"]
