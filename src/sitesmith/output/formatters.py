"""Output mode selection for ServiceResult.

The CLI renders results for humans (Rich), for scripts (``--quiet``), or
for machines (``--json``). This module picks the mode; the Rich layouts
live in :mod:`sitesmith.output.renderers`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sitesmith.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from sitesmith.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    JSON wins over quiet; quiet wins over the default human output.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
