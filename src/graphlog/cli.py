"""Root CLI group for graphlog with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from graphlog import __version__
from graphlog.commands import register_commands
from graphlog.commands._context import AppContext
from graphlog.config.settings import GraphlogSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="graphlog")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output (bare sequences and counts).")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and telemetry.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--no-interact", is_flag=True, help="Non-interactive mode (no prompts).")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "-p",
    "--path",
    "store_root",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Store root directory (default: beside graphlog.toml, else CWD).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    no_interact: bool,
    config_path: str | None,
    store_root: Path | None,
) -> None:
    """graphlog — persistent directed graphs with constrained search."""
    settings = GraphlogSettings.from_cli(
        config_path=config_path,
        store_root=store_root,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        no_interact=no_interact,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
