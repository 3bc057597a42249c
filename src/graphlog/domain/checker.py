"""Independent post-hoc validation of search results.

These functions re-derive every property a result must have from the
snapshot and the constraint set, without sharing code with the searches.
Each returns a list of human-readable violations; empty means valid.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from graphlog.domain.constraints import ConstraintSet

if TYPE_CHECKING:
    from graphlog.domain.graph import Graph
    from graphlog.domain.paths import Cycle, ScoredPath


def _walk_problems(vertices: tuple[int, ...], score: int, graph: Graph) -> list[str]:
    problems: list[str] = []
    total = 0
    for u, v in zip(vertices, vertices[1:], strict=False):
        weight = graph.weight(u, v)
        if weight is None:
            problems.append(f"edge {u}->{v} is not in the graph")
        else:
            total += weight
    if not problems and total != score:
        problems.append(f"reported score {score} but edges sum to {total}")
    return problems


def _bound_problems(c: ConstraintSet, length: int, score: int) -> list[str]:
    problems: list[str] = []
    lo_len, hi_len = c.length_range()
    if length < lo_len or (hi_len is not None and length > hi_len):
        problems.append(f"length {length} outside [{lo_len}, {hi_len}]")
    lo_score, hi_score = c.score_range()
    if score < lo_score or (hi_score is not None and score > hi_score):
        problems.append(f"score {score} outside [{lo_score}, {hi_score}]")
    return problems


def _membership_problems(c: ConstraintSet, vertices: tuple[int, ...]) -> list[str]:
    problems: list[str] = []
    present = set(vertices)
    edges = set(zip(vertices, vertices[1:], strict=False))
    for v in sorted(c.include_vertices - present):
        problems.append(f"included vertex {v} is missing")
    for v in sorted(c.exclude_vertices & present):
        problems.append(f"excluded vertex {v} is used")
    for u, v in sorted(c.include_edges - edges):
        problems.append(f"included edge {u}->{v} is missing")
    for u, v in sorted(c.exclude_edges & edges):
        problems.append(f"excluded edge {u}->{v} is used")
    return problems


def check_path(
    path: ScoredPath,
    graph: Graph,
    constraints: ConstraintSet | None,
    start: int,
    end: int,
) -> list[str]:
    c = constraints or ConstraintSet()
    vertices = path.vertices
    if not vertices:
        return ["path is empty"]
    problems: list[str] = []
    if vertices[0] != start:
        problems.append(f"path starts at {vertices[0]}, expected {start}")
    if vertices[-1] != end:
        problems.append(f"path ends at {vertices[-1]}, expected {end}")
    problems += _walk_problems(vertices, path.score, graph)
    problems += _membership_problems(c, vertices)
    problems += _bound_problems(c, path.length, path.score)

    # Ordered vertices: every one present, and no occurrence of one after a
    # later one in the order
    present = set(vertices)
    problems += [f"ordered vertex {v} is missing" for v in c.ordered_vertices if v not in present]
    order_pos = {v: i for i, v in enumerate(c.ordered_vertices)}
    reached = -1
    for v in vertices:
        pos = order_pos.get(v)
        if pos is None:
            continue
        if pos < reached:
            problems.append(f"ordered vertices {list(c.ordered_vertices)} are visited out of order")
            break
        reached = pos

    if c.forbid_cycle and path.has_repeat():
        problems.append("path repeats a vertex although cycles are forbidden")
    if c.require_cycle and not path.has_repeat():
        problems.append("path contains no cycle although one is required")
    return problems


def check_cycle(cycle: Cycle, graph: Graph, constraints: ConstraintSet | None = None) -> list[str]:
    c = constraints or ConstraintSet()
    vertices = cycle.vertices
    if len(vertices) < 2 or vertices[0] != vertices[-1]:
        return [f"{list(vertices)} is not a closed walk"]
    problems: list[str] = []
    members = cycle.members()
    if len(set(members)) != len(members):
        problems.append("cycle repeats an internal vertex")
    problems += _walk_problems(vertices, cycle.score, graph)
    problems += _membership_problems(c, vertices)
    problems += _bound_problems(c, cycle.length, cycle.score)
    return problems
