"""Subcommand modules for sitesmith.

Provides register_commands() which uses deferred imports to keep
``sitesmith --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every subcommand on the root CLI group."""
    from sitesmith.commands.build import build, clean
    from sitesmith.commands.inspect import render, routes, variables

    cli.add_command(build)
    cli.add_command(clean)
    cli.add_command(routes)
    cli.add_command(render)
    cli.add_command(variables)
