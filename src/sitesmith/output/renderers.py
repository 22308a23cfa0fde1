"""Human-readable output for each service operation.

:func:`render_result` looks up a renderer by ``result.op`` (``build``,
``clean``, ``routes``, ``variables``); other operations print their data
as ``key: value`` lines. Failures always use the error renderer.
"""

from __future__ import annotations

import json as _json
from collections.abc import Callable
from io import StringIO
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text
from ruamel.yaml import YAML

from sitesmith.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from sitesmith.services.result import ServiceResult


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Return *result* as Rich-rendered text, without a trailing newline."""
    console = create_console()
    renderer = _OP_RENDERERS.get(result.op, _render_generic) if result.ok else _render_error
    renderer(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """One-line output for ``--quiet``; ``routes`` prints bare URLs, one per line."""
    if not result.ok:
        reason = result.error.message if result.error else "unknown error"
        return f"ERROR: {result.op}: {reason}"
    if result.op == "routes":
        return "\n".join(item["url"] for item in result.data.get("items", []))
    return f"OK: {result.op}"


def dump_yaml(data: dict[str, Any]) -> str:
    """Dump *data* as block-style YAML."""
    y = YAML(typ="safe", pure=True)
    y.default_flow_style = False
    buf = StringIO()
    y.dump(_yaml_safe(data), buf)
    return buf.getvalue()


# ── Helpers ───────────────────────────────────────────────────────────


def _yaml_safe(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _yaml_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_yaml_safe(v) for v in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "site.ok"), "  ", (result.op, "site.op")))


def _format_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return _json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


# ── Renderers ─────────────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        console.print(Text(f"  {key}: ", style="site.key"), _format_value(value), sep="")


def _render_build(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    verb = "would create" if data.get("dry_run") else "created"
    console.print(f"  Destination: {data.get('destination', '')}", markup=False)
    console.print(f"  {verb} {data.get('count', 0)} files in {data.get('elapsed', 0)}s.")
    if data.get("removed"):
        console.print(f"  removed {data['removed']} stale files.")
    if verbose or data.get("dry_run"):
        for name in data.get("files", []):
            console.print(Text(f"    {name}", style="site.path"))


def _render_clean(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    console.print(f"  Destination: {result.data.get('destination', '')}", markup=False)
    console.print(f"  removed {result.data.get('removed', 0)} stale files.")
    if verbose:
        for name in result.data.get("files", []):
            console.print(Text(f"    {name}", style="site.path"))


def _render_routes(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(title=f"Routes ({result.data.get('count', 0)})", title_justify="left")
    table.add_column("URL", style="site.url")
    table.add_column("Source", style="site.path")
    if verbose:
        table.add_column("Kind")
    for item in result.data.get("items", []):
        row: list[str | Text] = [item["url"], item["path"]]
        if verbose:
            row.append(Text(item["kind"], style=style_for_kind(item["kind"])))
        table.add_row(*row)
    console.print(table)


def _render_variables(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print(Text("Variables:", style="site.op"))
    console.print(dump_yaml(result.data.get("variables", {})), markup=False, end="")


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    msg = result.error.message if result.error else "Unknown error"
    console.print(Text.assemble(("ERROR", "site.error"), "  ", (result.op, "site.op")))
    console.print(f"  {msg}", markup=False)
    if verbose and result.error and result.error.detail:
        for key, value in result.error.detail.items():
            console.print(Text(f"  {key}: ", style="site.key"), str(value), sep="")


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "build": _render_build,
    "clean": _render_clean,
    "routes": _render_routes,
    "variables": _render_variables,
}
