"""Command group: append vertex and edge removals."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from graphlog.commands._base import GraphlogGroup
from graphlog.commands._params import EDGE
from graphlog.services.mutation import MutationService

if TYPE_CHECKING:
    from graphlog.commands._context import AppContext

_REMOVE_EXAMPLES = """\
  graphlog remove vertex 3
  graphlog remove vertex 3 4 --force
  graphlog remove edge 1:2"""


@click.group(cls=GraphlogGroup, examples=_REMOVE_EXAMPLES)
def remove() -> None:
    """Append removals to the command log."""


@remove.command(examples="  graphlog remove vertex 3 --force")
@click.argument("vertices", nargs=-1, required=True, type=int)
@click.option("-f", "--force", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def vertex(app: AppContext, vertices: tuple[int, ...], force: bool) -> None:
    """Remove vertices together with all their edges."""
    listed = ", ".join(str(v) for v in vertices)
    app.confirm(f"Remove vertices {listed} and every edge touching them?", force=force)
    app.emit(MutationService(app.workspace).remove_vertices(vertices))


@remove.command(examples="  graphlog remove edge 1:2 2:3")
@click.argument("edges", nargs=-1, required=True, type=EDGE)
@click.pass_obj
def edge(app: AppContext, edges: tuple[tuple[int, int], ...]) -> None:
    """Remove directed edges given as FROM:TO."""
    app.emit(MutationService(app.workspace).remove_edges(list(edges)))
