"""AppContext, the object every subcommand receives through ``@click.pass_obj``.

It holds the resolved settings, builds the Site on demand, and prints
service results with the CLI's exit-status rules.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
import structlog

from sitesmith.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from sitesmith.config.settings import SiteSettings
    from sitesmith.services.result import ServiceResult
    from sitesmith.services.site import Site

logger = structlog.get_logger(__name__)


class AppContext:
    """Per-invocation state shared by the root group and its subcommands.

    The site is created on first use so ``--help`` and ``--version``
    never touch the source tree.
    """

    def __init__(self, settings: SiteSettings) -> None:
        self.settings = settings
        self._site: Site | None = None

        from sitesmith.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

    @property
    def site(self) -> Site:
        """The site instance (created lazily on first access)."""
        if self._site is None:
            from sitesmith.services.site import Site

            self._site = Site(self.settings)
            logger.debug(
                "site configured",
                source=str(self.settings.source),
                destination=str(self._site.destination),
                config=str(self.settings.config_path) if self.settings.config_path else None,
            )
        return self._site

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and turn a failure into exit status 1.

        Successful results go to stdout, with any warnings on stderr (JSON
        output carries them in the payload instead, and ``--quiet`` drops
        them). Failed results go to stderr.
        """
        out = self.output_settings
        text = format_result(result, settings=out)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)
        click.echo(text)
        if out.json_output or out.quiet:
            return
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
