"""Rich console and theme used by the renderers.

Renderers print into an in-memory console and hand back the text, so the
CLI decides where it goes (stdout for results, stderr for errors). Colour
is dropped automatically when the console is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SITESMITH_THEME = Theme(
    {
        "site.ok": "bold green",
        "site.error": "bold red",
        "site.warning": "bold yellow",
        "site.op": "bold cyan",
        "site.key": "dim",
        "site.url": "bold blue",
        "site.path": "dim",
        "site.kind.static": "yellow",
        "site.kind.dynamic": "green",
    }
)

DEFAULT_WIDTH = 120


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Return a themed console writing to a fresh buffer.

    The fixed default width keeps route tables from wrapping differently
    between terminals and test runs.
    """
    buffer = StringIO()
    return Console(
        file=buffer,
        theme=SITESMITH_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    """Text printed so far to a console from :func:`create_console`."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        msg = "console does not write to a buffer"
        raise TypeError(msg)
    return buffer.getvalue()


def style_for_kind(kind: str) -> str:
    """Theme style for a page kind (``static`` or ``dynamic``); empty otherwise."""
    return f"site.kind.{kind}" if kind in ("static", "dynamic") else ""
