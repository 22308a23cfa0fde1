"""Tests for the format_result dispatcher and OutputSettings."""

import json

from sitesmith.output.formatters import OutputSettings, format_result
from sitesmith.services.result import ServiceError, ServiceResult


def _ok(op: str = "test", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "test", msg: str = "fail") -> ServiceResult:
    return ServiceResult(ok=False, op=op, error=ServiceError(code="IO_ERROR", message=msg))


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False


class TestFormatResultJSON:
    def test_json_mode_returns_valid_json(self) -> None:
        output = format_result(_ok("build", count=3), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is True
        assert data["op"] == "build"
        assert data["data"]["count"] == 3

    def test_json_mode_error(self) -> None:
        output = format_result(_err("build", "Bad"), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is False
        assert data["error"]["code"] == "IO_ERROR"
        assert data["error"]["message"] == "Bad"

    def test_json_wins_over_quiet(self) -> None:
        settings = OutputSettings(json_output=True, quiet=True)
        assert json.loads(format_result(_ok(), settings=settings))["ok"] is True


class TestFormatResultQuiet:
    def test_quiet_success(self) -> None:
        assert format_result(_ok("build"), settings=OutputSettings(quiet=True)) == "OK: build"

    def test_quiet_error(self) -> None:
        output = format_result(_err("build", "boom"), settings=OutputSettings(quiet=True))
        assert output.startswith("ERROR: build")
        assert "boom" in output

    def test_quiet_routes_lists_urls(self) -> None:
        result = _ok("routes", count=2, items=[{"url": "/"}, {"url": "/a/"}])
        assert format_result(result, settings=OutputSettings(quiet=True)) == "/\n/a/"


class TestFormatResultHuman:
    def test_default_is_human(self) -> None:
        output = format_result(_ok("build", count=1, destination="/out", removed=0, elapsed=0.1))
        assert "OK" in output
        assert "created 1 files" in output
