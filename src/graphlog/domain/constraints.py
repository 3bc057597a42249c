"""Constraint model: a validated conjunction of path/cycle predicates.

A :class:`ConstraintSet` is the logical AND of its populated fields. The
``validate_*`` functions catch contradictions *before* any search starts and
raise :class:`InvalidConstraint`. A set that passes validation may still have
no solution; that is a search outcome, not an error.

Lengths count vertices; scores sum traversed edge weights.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, NoReturn

from pydantic import BaseModel

from graphlog.domain.errors import InvalidConstraint

if TYPE_CHECKING:
    from graphlog.domain.graph import Graph


class ConstraintSet(BaseModel):
    """Optional predicates on a path or cycle. Unset fields impose nothing."""

    model_config = {"frozen": True}

    include_vertices: frozenset[int] = frozenset()
    exclude_vertices: frozenset[int] = frozenset()
    include_edges: frozenset[tuple[int, int]] = frozenset()
    exclude_edges: frozenset[tuple[int, int]] = frozenset()
    ordered_vertices: tuple[int, ...] = ()

    exact_length: int | None = None
    min_length: int | None = None
    max_length: int | None = None

    exact_score: int | None = None
    min_score: int | None = None
    max_score: int | None = None

    require_cycle: bool = False
    forbid_cycle: bool = False

    def is_empty(self) -> bool:
        return self == _EMPTY

    def length_range(self) -> tuple[int, int | None]:
        """Effective ``(lower, upper)`` vertex-count bounds; upper None = unbounded."""
        return _combine(self.min_length, self.max_length, self.exact_length)

    def score_range(self) -> tuple[int, int | None]:
        """Effective ``(lower, upper)`` score bounds; upper None = unbounded."""
        return _combine(self.min_score, self.max_score, self.exact_score)

    def has_lower_bounds(self) -> bool:
        return any(
            x is not None
            for x in (self.min_length, self.exact_length, self.min_score, self.exact_score)
        )

    def describe(self) -> dict[str, object]:
        """Populated fields only, in a JSON-friendly shape."""
        out: dict[str, object] = {}
        for name, value in self.model_dump(exclude_defaults=True).items():
            if isinstance(value, (set, frozenset)):
                out[name] = sorted(value)
            elif isinstance(value, tuple):
                out[name] = list(value)
            else:
                out[name] = value
        return out


_EMPTY = ConstraintSet()


def _combine(low: int | None, high: int | None, exact: int | None) -> tuple[int, int | None]:
    lows = [x for x in (low, exact) if x is not None]
    highs = [x for x in (high, exact) if x is not None]
    return max(lows, default=0), min(highs, default=None)


def _fail(message: str, **detail: object) -> NoReturn:
    raise InvalidConstraint(message, **detail)


def _fmt(items: Iterable[object]) -> str:
    return ", ".join(str(x) for x in sorted(items))  # type: ignore[type-var]


# ---------------------------------------------------------------------------
# Checks shared by path and cycle queries
# ---------------------------------------------------------------------------


def _check_bounds(c: ConstraintSet) -> None:
    for name in ("exact_length", "min_length", "max_length"):
        value = getattr(c, name)
        if value is not None and value < 1:
            _fail(f"{name.replace('_', '-')} must be at least 1, got {value}", field=name)
    for name in ("exact_score", "min_score", "max_score"):
        value = getattr(c, name)
        if value is not None and value < 0:
            _fail(f"{name.replace('_', '-')} must not be negative, got {value}", field=name)

    for kind in ("length", "score"):
        low = getattr(c, f"min_{kind}")
        high = getattr(c, f"max_{kind}")
        exact = getattr(c, f"exact_{kind}")
        if low is not None and high is not None and low > high:
            _fail(f"Incompatible min/max {kind} constraints: min={low}, max={high}")
        if exact is not None and low is not None and exact < low:
            _fail(f"Incompatible exact/min {kind} constraints: exact={exact}, min={low}")
        if exact is not None and high is not None and exact > high:
            _fail(f"Incompatible exact/max {kind} constraints: exact={exact}, max={high}")


def _check_inclusion_exclusion(c: ConstraintSet) -> None:
    clash = c.include_vertices & c.exclude_vertices
    if clash:
        _fail(
            f"Vertices {_fmt(clash)} are both included and excluded",
            vertices=sorted(clash),
        )
    edge_clash = c.include_edges & c.exclude_edges
    if edge_clash:
        _fail(
            f"Edges {_fmt(edge_clash)} are both included and excluded",
            edges=sorted(edge_clash),
        )
    endpoints = {v for edge in c.include_edges for v in edge}
    blocked = endpoints & c.exclude_vertices
    if blocked:
        _fail(
            f"Included edges use excluded vertices {_fmt(blocked)}",
            vertices=sorted(blocked),
        )
    if c.require_cycle and c.forbid_cycle:
        _fail("require-cycle and forbid-cycle are mutually exclusive")


def _check_present(graph: Graph, vertices: Iterable[int], what: str) -> None:
    missing = {v for v in vertices if v not in graph}
    if missing:
        _fail(
            f"{what} reference vertices absent from the graph: {_fmt(missing)}",
            vertices=sorted(missing),
        )


def _check_length_capacity(c: ConstraintSet, needed: int, what: str) -> None:
    _, high = c.length_range()
    if high is not None and high < needed:
        _fail(
            f"Length bound {high} is smaller than the {needed} vertices required by {what}",
            needed=needed,
            bound=high,
        )


# ---------------------------------------------------------------------------
# Public validators
# ---------------------------------------------------------------------------


def validate_path_constraints(c: ConstraintSet, graph: Graph, start: int, end: int) -> None:
    """Validate *c* for a constrained start→end path query.

    Raises:
        InvalidConstraint: on any contradiction or reference to a missing vertex.
    """
    for label, vertex in (("start", start), ("end", end)):
        if vertex not in graph:
            _fail(f"The {label} vertex {vertex} is not in the graph", vertex=vertex)
        if vertex in c.exclude_vertices:
            _fail(f"The {label} vertex {vertex} is excluded", vertex=vertex)
    if c.include_edges:
        _fail("include-edges applies to cycle queries only")

    _check_bounds(c)
    _check_inclusion_exclusion(c)

    ordered = c.ordered_vertices
    if len(set(ordered)) != len(ordered):
        _fail("ordered-vertices must not repeat a vertex", ordered=list(ordered))
    excluded_ordered = set(ordered) & c.exclude_vertices
    if excluded_ordered:
        _fail(
            f"Ordered vertices {_fmt(excluded_ordered)} are also excluded",
            vertices=sorted(excluded_ordered),
        )
    if ordered and c.include_vertices and set(ordered).isdisjoint(c.include_vertices):
        _fail("ordered-vertices share no vertex with include-vertices")
    if start in ordered and ordered[0] != start:
        _fail(
            f"The start vertex {start} can only be first in ordered-vertices",
            ordered=list(ordered),
        )

    _check_present(graph, c.include_vertices, "include-vertices")
    _check_present(graph, ordered, "ordered-vertices")

    mandatory = set(c.include_vertices) | set(ordered) | {start, end}
    needed = len(mandatory) + (1 if c.require_cycle else 0)
    _check_length_capacity(c, needed, "the mandatory vertices")


def validate_cycle_constraints(c: ConstraintSet, graph: Graph) -> None:
    """Validate *c* for a cycle query.

    Raises:
        InvalidConstraint: on any contradiction, inapplicable field, or
            reference to a missing vertex or edge.
    """
    if c.ordered_vertices:
        _fail("ordered-vertices applies to path queries only")
    if c.require_cycle or c.forbid_cycle:
        _fail("require-cycle/forbid-cycle apply to path queries only")

    _check_bounds(c)
    _check_inclusion_exclusion(c)

    _check_present(graph, c.include_vertices, "include-vertices")
    missing_edges = {e for e in c.include_edges if not graph.has_edge(*e)}
    if missing_edges:
        _fail(
            f"include-edges reference edges absent from the graph: {_fmt(missing_edges)}",
            edges=sorted(missing_edges),
        )

    mandatory = set(c.include_vertices) | {v for edge in c.include_edges for v in edge}
    _check_length_capacity(c, len(mandatory), "the included vertices and edges")


def ensure_unconstrained(c: ConstraintSet, mode: str) -> None:
    """Reject any populated field for modes that take no constraints."""
    if not c.is_empty():
        _fail(f"The {mode} mode does not accept constraints", fields=sorted(c.describe()))
