"""Commands: build the site, and clean stale output."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitesmith.commands._base import SiteCommand

if TYPE_CHECKING:
    from sitesmith.commands._context import AppContext


@click.command(
    cls=SiteCommand,
    examples="""\
  sitesmith build
  sitesmith build --dry-run
  sitesmith -d public build
  sitesmith --json build""",
)
@click.option("-n", "--dry-run", is_flag=True, help="Show what would be written.")
@click.pass_obj
def build(app: AppContext, dry_run: bool) -> None:
    """Render the site into the destination directory."""
    from sitesmith.services.build import BuildService

    app.emit(BuildService(app.site).build(dry_run=dry_run))


@click.command(
    cls=SiteCommand,
    examples="""\
  sitesmith clean
  sitesmith -v clean""",
)
@click.pass_obj
def clean(app: AppContext) -> None:
    """Remove stale output files and empty directories."""
    from sitesmith.services.build import BuildService

    app.emit(BuildService(app.site).clean())
