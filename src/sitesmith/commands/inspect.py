"""Commands: inspect routes, rendered pages, and page variables."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitesmith.commands._base import SiteCommand

if TYPE_CHECKING:
    from sitesmith.commands._context import AppContext


@click.command(
    cls=SiteCommand,
    examples="""\
  sitesmith routes
  sitesmith routes --dynamic
  sitesmith -q routes""",
)
@click.option("--dynamic", "dynamic_only", is_flag=True, help="Only show rendered pages.")
@click.pass_obj
def routes(app: AppContext, dynamic_only: bool) -> None:
    """List the URL of every published page."""
    from sitesmith.services.inspect import InspectService

    app.emit(InspectService(app.site).routes(dynamic_only=dynamic_only))


@click.command(
    cls=SiteCommand,
    examples="""\
  sitesmith render /
  sitesmith render /about/
  sitesmith render _posts/2024-01-01-hello.md""",
)
@click.argument("target", default="/")
@click.pass_obj
def render(app: AppContext, target: str) -> None:
    """Render one page to stdout.

    TARGET is a URL path when it starts with "/", otherwise a file path
    relative to the site source.
    """
    from sitesmith.services.inspect import InspectService

    result = InspectService(app.site).render(target)
    if not result.ok or app.settings.json_output:
        app.emit(result)
        return
    if not app.settings.quiet:
        click.echo(f"Render: {result.data['source']}", err=True)
        click.echo(f"URL: {result.data['url']}", err=True)
    click.echo(result.data["content"], nl=False)


@click.command(
    cls=SiteCommand,
    examples="""\
  sitesmith variables /
  sitesmith variables about.md
  sitesmith --json variables /feed.xml""",
)
@click.argument("target", default="/")
@click.pass_obj
def variables(app: AppContext, target: str) -> None:
    """Show a page's variables before rendering.

    TARGET is a URL path when it starts with "/", otherwise a file path
    relative to the site source.
    """
    from sitesmith.services.inspect import InspectService

    app.emit(InspectService(app.site).variables(target))
