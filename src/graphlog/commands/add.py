"""Command group: append vertices, edges and edge patterns."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from graphlog.commands._base import GraphlogGroup
from graphlog.commands._params import EDGE
from graphlog.services.mutation import MutationService

if TYPE_CHECKING:
    from graphlog.commands._context import AppContext

_ADD_EXAMPLES = """\
  graphlog add vertex 1 2 3
  graphlog add edge 1:2 2:3
  graphlog add edge 1:2 --weight 4
  graphlog add chain 1 2 3 4
  graphlog add cycle 1 2 3 --reverse
  graphlog add star 1 2 3 4
  graphlog add clique 1 2 3"""

_weight_option = click.option(
    "--weight",
    default=1,
    show_default=True,
    type=int,
    help="Edge weight (non-default values need graph.weighted_edges).",
)
_reverse_option = click.option("--reverse", is_flag=True, help="Flip every generated edge.")


@click.group(cls=GraphlogGroup, examples=_ADD_EXAMPLES)
def add() -> None:
    """Append vertices and edges to the command log."""


@add.command(examples="  graphlog add vertex 1 2 3")
@click.argument("vertices", nargs=-1, required=True, type=int)
@click.pass_obj
def vertex(app: AppContext, vertices: tuple[int, ...]) -> None:
    """Add one or more vertices."""
    app.emit(MutationService(app.workspace).add_vertices(vertices))


@add.command(
    examples="""\
  graphlog add edge 1:2
  graphlog add edge 1:2 3:4 --reverse"""
)
@click.argument("edges", nargs=-1, required=True, type=EDGE)
@_weight_option
@_reverse_option
@click.pass_obj
def edge(app: AppContext, edges: tuple[tuple[int, int], ...], weight: int, reverse: bool) -> None:
    """Add directed edges given as FROM:TO (endpoints are created as needed)."""
    pairs = [(v, u) for u, v in edges] if reverse else list(edges)
    app.emit(MutationService(app.workspace).add_edges(pairs, weight=weight))


def _shape_command(shape: str, doc: str, *, reversible: bool = True) -> click.Command:
    @click.argument("vertices", nargs=-1, required=True, type=int)
    @_weight_option
    @click.pass_obj
    def command(app: AppContext, vertices: tuple[int, ...], weight: int, reverse: bool = False) -> None:
        app.emit(
            MutationService(app.workspace).add_shape(shape, vertices, weight=weight, reverse=reverse)
        )

    command.__doc__ = doc
    if reversible:
        command = _reverse_option(command)
    return add.command(shape, examples=f"  graphlog add {shape} 1 2 3")(command)


chain = _shape_command("chain", "Link the vertices in order: 1->2->3.")
cycle = _shape_command("cycle", "Link the vertices in order and close back to the first.")
star = _shape_command("star", "Link the first vertex to every other vertex.")
clique = _shape_command("clique", "Link every vertex to every other vertex.", reversible=False)
