"""Tests for the operation-specific Rich renderers."""

from sitesmith.output.renderers import dump_yaml, render_result
from sitesmith.services.result import ServiceError, ServiceResult


def _build(**data: object) -> ServiceResult:
    base: dict[str, object] = {"count": 2, "destination": "/out", "removed": 0, "elapsed": 0.5}
    base.update(data)
    return ServiceResult(ok=True, op="build", data=base)


class TestRenderBuild:
    def test_summary(self) -> None:
        output = render_result(_build())
        assert "OK  build" in output
        assert "Destination: /out" in output
        assert "created 2 files in 0.5s." in output
        assert "stale" not in output

    def test_removed_count(self) -> None:
        assert "removed 3 stale files." in render_result(_build(removed=3))

    def test_dry_run_lists_files(self) -> None:
        output = render_result(_build(dry_run=True, files=["index.html", "about/index.html"]))
        assert "would create 2 files" in output
        assert "about/index.html" in output


class TestRenderClean:
    def test_summary(self) -> None:
        result = ServiceResult(
            ok=True, op="clean", data={"destination": "/out", "removed": 1, "files": ["x.txt"]}
        )
        assert "removed 1 stale files." in render_result(result)
        assert "x.txt" not in render_result(result)
        assert "x.txt" in render_result(result, verbose=True)


class TestRenderRoutes:
    def _result(self) -> ServiceResult:
        items = [
            {"url": "/", "path": "index.md", "kind": "dynamic"},
            {"url": "/robots.txt", "path": "robots.txt", "kind": "static"},
        ]
        return ServiceResult(ok=True, op="routes", data={"count": 2, "items": items})

    def test_table(self) -> None:
        output = render_result(self._result())
        assert "Routes (2)" in output
        assert "/robots.txt" in output
        assert "index.md" in output
        assert "Kind" not in output

    def test_verbose_shows_kind(self) -> None:
        output = render_result(self._result(), verbose=True)
        assert "Kind" in output
        assert "static" in output


class TestRenderVariables:
    def test_yaml_block(self) -> None:
        result = ServiceResult(
            ok=True,
            op="variables",
            data={"path": "a.md", "url": "/a/", "variables": {"title": "A", "tags": ["x"]}},
        )
        output = render_result(result)
        assert output.startswith("Variables:")
        assert "title: A" in output
        assert "- x" in output


class TestRenderError:
    def test_message(self) -> None:
        result = ServiceResult(
            ok=False,
            op="render",
            error=ServiceError(
                code="NOT_FOUND", message="render /x: no such page", detail={"path": "/x"}
            ),
        )
        output = render_result(result)
        assert "ERROR" in output
        assert "render /x: no such page" in output
        assert "path: /x" not in output
        assert "path: /x" in render_result(result, verbose=True)


class TestGeneric:
    def test_unknown_op(self) -> None:
        result = ServiceResult(ok=True, op="other", data={"a": 1, "b": [1, 2]})
        output = render_result(result)
        assert "a: 1" in output
        assert "b: [1,2]" in output


class TestDumpYaml:
    def test_non_plain_values_stringified(self) -> None:
        from datetime import UTC, datetime

        text = dump_yaml({"when": datetime(2024, 1, 2, tzinfo=UTC), "n": None})
        assert "2024-01-02 00:00:00+00:00" in text
        assert "n:" in text
