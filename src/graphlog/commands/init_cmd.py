"""Standalone command: create the graph store."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from graphlog.commands._base import GraphlogCommand
from graphlog.services.store import StoreService

if TYPE_CHECKING:
    from graphlog.commands._context import AppContext


@click.command(
    "init",
    cls=GraphlogCommand,
    examples="""\
  graphlog init
  graphlog --path ./work init""",
)
@click.pass_obj
def init_cmd(app: AppContext) -> None:
    """Create an empty command log in the store root."""
    app.emit(StoreService(app.workspace).init())
