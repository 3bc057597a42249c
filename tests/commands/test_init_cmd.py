"""Tests for the init command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from graphlog.cli import cli


@pytest.mark.usefixtures("_isolated_store")
class TestInitCommand:
    def test_creates_store(self, cli_runner: CliRunner, store_root: Path) -> None:
        result = cli_runner.invoke(cli, ["init"])
        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        assert (store_root / ".graph" / "commands").is_file()

    def test_twice_warns(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["init"])
        result = cli_runner.invoke(cli, ["init"])
        assert result.exit_code == 0
        assert "WARNING" in result.output

    def test_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "init"])
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["data"]["created"] is True

    def test_explicit_path(self, cli_runner: CliRunner, store_root: Path) -> None:
        target = store_root / "elsewhere"
        result = cli_runner.invoke(cli, ["--path", str(target), "init"])
        assert result.exit_code == 0
        assert (target / ".graph" / "commands").is_file()

    def test_dirname_from_config(self, cli_runner: CliRunner, store_root: Path) -> None:
        (store_root / "graphlog.toml").write_text('[store]\ndirname = "g"\n')
        result = cli_runner.invoke(cli, ["init"])
        assert result.exit_code == 0
        assert (store_root / "g" / "commands").is_file()
