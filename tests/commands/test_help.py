"""Parametrized help tests for all CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from graphlog.cli import cli

# (CLI args, expected keywords in output)
HELP_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--help"], ["add", "remove", "query", "init", "build", "clean", "describe"]),
    (["add", "--help"], ["vertex", "edge", "chain", "cycle", "star", "clique"]),
    (["add", "edge", "--help"], ["--weight", "--reverse"]),
    (["add", "chain", "--help"], ["VERTICES", "--reverse"]),
    (["add", "clique", "--help"], ["VERTICES", "--weight"]),
    (["remove", "--help"], ["vertex", "edge"]),
    (["remove", "vertex", "--help"], ["--force"]),
    (["query", "--help"], ["csp", "cycle", "topo-sort"]),
    (["query", "csp", "--help"], ["START", "END", "--ordered", "--require-cycle", "--exclude-edges"]),
    (["query", "cycle", "--help"], ["--girth", "--take", "--include-edges", "--hamiltonian"]),
    (["build", "--help"], ["--compact"]),
    (["clean", "--help"], ["--purge", "--force"]),
]


@pytest.mark.parametrize(("args", "keywords"), HELP_COMMANDS)
def test_help(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    for keyword in keywords:
        assert keyword in result.output


def test_clique_has_no_reverse(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["add", "clique", "--help"])
    assert "--reverse" not in result.output
