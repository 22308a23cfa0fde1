"""Parametrized help tests for all CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from sitesmith.cli import cli

# (CLI args, expected keywords in output)
HELP_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--help"], ["build", "clean", "routes", "render", "variables", "--source", "--json"]),
    (["build", "--help"], ["--dry-run", "--examples"]),
    (["clean", "--help"], ["stale"]),
    (["routes", "--help"], ["--dynamic"]),
    (["render", "--help"], ["TARGET"]),
    (["variables", "--help"], ["TARGET"]),
]


@pytest.mark.parametrize(
    ("args", "keywords"),
    HELP_COMMANDS,
    ids=[" ".join(a) for a, _ in HELP_COMMANDS],
)
def test_help(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    for keyword in keywords:
        assert keyword in result.output


def test_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "sitesmith" in result.output


def test_no_subcommand_shows_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Commands:" in result.output
