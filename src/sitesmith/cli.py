"""Root CLI group for sitesmith with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from sitesmith import __version__
from sitesmith.commands import register_commands
from sitesmith.commands._context import AppContext
from sitesmith.config.settings import SiteSettings

_DIR = click.Path(file_okay=False, path_type=Path)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="sitesmith")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("-s", "--source", type=_DIR, default=None, help="Site source directory.")
@click.option("-d", "--destination", type=_DIR, default=None, help="Output directory.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    source: Path | None,
    destination: Path | None,
) -> None:
    """sitesmith — build a static site from a source tree."""
    ctx.ensure_object(dict)
    settings = SiteSettings.from_cli(
        config_path=config_path,
        source=source,
        destination=destination,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
