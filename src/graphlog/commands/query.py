"""Command group: constrained searches and whole-graph analysis."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from graphlog.commands._base import GraphlogCommand, GraphlogGroup
from graphlog.commands._params import constraint_options
from graphlog.services.query import QueryService

if TYPE_CHECKING:
    from graphlog.commands._context import AppContext
    from graphlog.domain.constraints import ConstraintSet

_QUERY_EXAMPLES = """\
  graphlog query csp 1 4
  graphlog query csp 1 4 --exclude 2 --max-length 5
  graphlog query csp 1 9 --ordered 3,5 --forbid-cycle
  graphlog query cycle --shortest --include 2
  graphlog query cycle --take 5 --max-length 4
  graphlog query cycle --count
  graphlog query cycle --girth
  graphlog query topo-sort"""

_FLAG_MODES = ("shortest", "longest", "all", "count", "head", "girth", "hamiltonian")


@click.group(cls=GraphlogGroup, examples=_QUERY_EXAMPLES)
def query() -> None:
    """Search the graph."""


@query.command(
    examples="""\
  graphlog query csp 1 4
  graphlog query csp 1 4 --include 3 --max-score 10
  graphlog --json query csp 1 4 --exclude-edges 1:2"""
)
@click.argument("start", type=int)
@click.argument("end", type=int)
@constraint_options(path=True)
@click.pass_obj
def csp(app: AppContext, start: int, end: int, constraints: ConstraintSet) -> None:
    """Lowest-score path from START to END satisfying every constraint."""
    app.emit(QueryService(app.workspace).csp(start, end, constraints))


@query.command(
    examples="""\
  graphlog query cycle --shortest
  graphlog query cycle --all --min-length 3 --exclude 7
  graphlog query cycle --take 2 --include-edges 1:2
  graphlog query cycle --hamiltonian"""
)
@click.option("--shortest", is_flag=True, help="Shortest cycle satisfying the constraints.")
@click.option("--longest", is_flag=True, help="Longest cycle satisfying the constraints.")
@click.option("--all", "all_", is_flag=True, help="Every satisfying cycle.")
@click.option("--count", is_flag=True, help="Number of satisfying cycles.")
@click.option("--head", is_flag=True, help="First satisfying cycle in discovery order.")
@click.option("--take", type=int, default=None, metavar="N", help="First N satisfying cycles.")
@click.option("--girth", is_flag=True, help="Length of the shortest cycle (no constraints).")
@click.option("--hamiltonian", is_flag=True, help="A cycle through every vertex (no constraints).")
@constraint_options(path=False)
@click.pass_obj
def cycle(
    app: AppContext,
    shortest: bool,
    longest: bool,
    all_: bool,
    count: bool,
    head: bool,
    take: int | None,
    girth: bool,
    hamiltonian: bool,
    constraints: ConstraintSet,
) -> None:
    """Enumerate simple cycles in one selection mode."""
    flags = dict(zip(_FLAG_MODES, (shortest, longest, all_, count, head, girth, hamiltonian), strict=True))
    chosen = [name for name, on in flags.items() if on]
    if take is not None:
        chosen.append("take")
    if len(chosen) != 1:
        names = ", ".join(f"--{m}" for m in (*_FLAG_MODES, "take"))
        msg = f"Choose exactly one mode out of {names}"
        raise click.UsageError(msg)

    mode: str | dict[str, object] = {"kind": "take", "n": take} if take is not None else chosen[0]
    app.emit(QueryService(app.workspace).cycles(mode, constraints))


@query.command(
    "topo-sort",
    cls=GraphlogCommand,
    examples="""\
  graphlog query topo-sort
  graphlog -q query topo-sort""",
)
@click.pass_obj
def topo_sort(app: AppContext) -> None:
    """Topological order, smallest id first among ready vertices."""
    app.emit(QueryService(app.workspace).topo_sort())


@click.command(
    cls=GraphlogCommand,
    examples="""\
  graphlog describe
  graphlog --json describe""",
)
@click.pass_obj
def describe(app: AppContext) -> None:
    """Summary statistics of the current graph."""
    app.emit(QueryService(app.workspace).describe())
