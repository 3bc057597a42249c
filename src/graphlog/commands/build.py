"""Standalone commands: build (materialise/compact) and clean."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from graphlog.commands._base import GraphlogCommand
from graphlog.services.store import StoreService

if TYPE_CHECKING:
    from graphlog.commands._context import AppContext


@click.command(
    cls=GraphlogCommand,
    examples="""\
  graphlog build
  graphlog build --compact""",
)
@click.option("--compact", is_flag=True, help="Rewrite the log as the minimal rebuild sequence.")
@click.pass_obj
def build(app: AppContext, compact: bool) -> None:
    """Replay the command log and report vertex/edge counts."""
    app.emit(StoreService(app.workspace).build(compact=compact))


@click.command(
    cls=GraphlogCommand,
    examples="""\
  graphlog clean
  graphlog clean --purge --force""",
)
@click.option("--purge", is_flag=True, help="Delete the whole store directory.")
@click.option("-f", "--force", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def clean(app: AppContext, purge: bool, force: bool) -> None:
    """Empty the command log. This cannot be undone."""
    what = "delete the graph store" if purge else "erase every command in the log"
    app.confirm(f"This will {what}. Continue?", force=force)
    app.emit(StoreService(app.workspace).clean(purge=purge))
