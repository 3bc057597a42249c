"""Shared Click parameter types and the constraint option block."""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any

import click

from graphlog.domain.constraints import ConstraintSet


class VertexListType(click.ParamType):
    """Comma-separated vertex ids: ``1,2,3``."""

    name = "vertices"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> tuple[int, ...]:
        if isinstance(value, tuple):
            return value
        try:
            return tuple(int(part) for part in str(value).split(",") if part.strip())
        except ValueError:
            self.fail(f"{value!r} is not a comma-separated list of vertex ids", param, ctx)


class EdgeType(click.ParamType):
    """A single directed edge: ``1:2``."""

    name = "edge"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> tuple[int, int]:
        if isinstance(value, tuple):
            return value
        source, sep, target = str(value).partition(":")
        try:
            if not sep:
                raise ValueError(value)
            return int(source), int(target)
        except ValueError:
            self.fail(f"{value!r} is not an edge of the form FROM:TO", param, ctx)


class EdgeListType(click.ParamType):
    """Comma-separated edges: ``1:2,2:3``."""

    name = "edges"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> tuple[tuple[int, int], ...]:
        if isinstance(value, tuple):
            return value
        return tuple(EDGE.convert(part, param, ctx) for part in str(value).split(",") if part.strip())


VERTICES = VertexListType()
EDGE = EdgeType()
EDGES = EdgeListType()

_CONSTRAINT_KEYS = (
    "include",
    "exclude",
    "include_edges",
    "exclude_edges",
    "ordered",
    "exact_length",
    "min_length",
    "max_length",
    "exact_score",
    "min_score",
    "max_score",
    "require_cycle",
    "forbid_cycle",
)


def constraint_options(*, path: bool) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Add the constraint options and pass a ``constraints`` ConstraintSet.

    Path queries get ``--ordered`` and ``--require-cycle/--forbid-cycle``;
    cycle queries get ``--include-edges``.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            raw = {key: kwargs.pop(key, None) for key in _CONSTRAINT_KEYS}
            kwargs["constraints"] = ConstraintSet(
                include_vertices=frozenset(raw["include"] or ()),
                exclude_vertices=frozenset(raw["exclude"] or ()),
                include_edges=frozenset(raw["include_edges"] or ()),
                exclude_edges=frozenset(raw["exclude_edges"] or ()),
                ordered_vertices=tuple(raw["ordered"] or ()),
                exact_length=raw["exact_length"],
                min_length=raw["min_length"],
                max_length=raw["max_length"],
                exact_score=raw["exact_score"],
                min_score=raw["min_score"],
                max_score=raw["max_score"],
                require_cycle=bool(raw["require_cycle"]),
                forbid_cycle=bool(raw["forbid_cycle"]),
            )
            return func(*args, **kwargs)

        options = [
            click.option("--include", type=VERTICES, help="Vertices that must appear (1,2,3)."),
            click.option("--exclude", type=VERTICES, help="Vertices that must not appear."),
            click.option("--exclude-edges", type=EDGES, help="Edges that must not be used (1:2,2:3)."),
            click.option("--exact-length", type=int, help="Exact vertex count."),
            click.option("--min-length", type=int, help="Minimum vertex count."),
            click.option("--max-length", type=int, help="Maximum vertex count."),
            click.option("--exact-score", type=int, help="Exact summed edge weight."),
            click.option("--min-score", type=int, help="Minimum summed edge weight."),
            click.option("--max-score", type=int, help="Maximum summed edge weight."),
        ]
        if path:
            options += [
                click.option("--ordered", type=VERTICES, help="Vertices that must appear in this order (1,2,3)."),
                click.option("--require-cycle", is_flag=True, help="The path must revisit a vertex."),
                click.option("--forbid-cycle", is_flag=True, help="The path must not revisit any vertex."),
            ]
        else:
            options.append(
                click.option("--include-edges", type=EDGES, help="Edges the cycle must use (1:2,2:3).")
            )
        for option in reversed(options):
            wrapper = option(wrapper)
        return wrapper

    return decorator
