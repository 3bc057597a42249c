"""Simple-cycle enumeration, girth and Hamiltonian search.

Discovery order is fixed: start vertices ascending, neighbours ascending,
and only vertices greater than the start are entered. Each simple cycle is
therefore found exactly once, already rotated to start at its minimum
vertex, and cycles sharing a start come out in lexicographic order.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator
from typing import TYPE_CHECKING

from graphlog.domain.constraints import (
    ConstraintSet,
    ensure_unconstrained,
    validate_cycle_constraints,
)
from graphlog.domain.limits import SearchBudget
from graphlog.domain.modes import (
    AllMode,
    CountMode,
    CycleMode,
    GirthMode,
    HamiltonianMode,
    HeadMode,
    LongestMode,
    ShortestMode,
    TakeMode,
)
from graphlog.domain.paths import Cycle, NoSolution, cycle_sort_key

if TYPE_CHECKING:
    from graphlog.domain.graph import Graph

logger = logging.getLogger(__name__)

type CycleOutcome = Cycle | NoSolution | list[Cycle] | int


class _CycleSearch:
    """Iterative DFS over simple cycles honouring a validated constraint set.

    ``hi_len`` may be lowered by the caller between yields; the walk reads
    it on every step.
    """

    def __init__(self, graph: Graph, c: ConstraintSet, budget: SearchBudget) -> None:
        self.graph = graph
        self.c = c
        self.budget = budget
        self.lo_len, self.hi_len = c.length_range()
        self.lo_score, self.hi_score = c.score_range()
        self.min_weight = max(graph.min_weight, 1)

        endpoints = {v for edge in c.include_edges for v in edge}
        mandatory = set(c.include_vertices) | endpoints
        # No cycle starting above its smallest mandatory vertex can contain it
        self.last_start = min(mandatory) if mandatory else None

    def _too_long(self, length: int) -> bool:
        return self.hi_len is not None and length > self.hi_len

    def walk(self, *, materialize: bool = True) -> Iterator[tuple[tuple[int, ...] | None, int]]:
        """Yield ``(closed vertex tuple, score)`` per satisfying cycle.

        With ``materialize=False`` the tuple is None and never built.
        """
        c = self.c
        graph = self.graph
        need_vertices = len(c.include_vertices)
        need_edges = len(c.include_edges)

        for s in graph.vertices:
            if self.last_start is not None and s > self.last_start:
                break
            if s in c.exclude_vertices:
                continue

            path = [s]
            weights: list[int] = []
            on_path = {s}
            score = 0
            seen_vertices = 1 if s in c.include_vertices else 0
            seen_edges = 0
            stack = [iter(graph.successors(s))]

            while stack:
                u = path[-1]
                descended = False
                for w, weight in stack[-1]:
                    if (u, w) in c.exclude_edges:
                        continue
                    if w == s:
                        total = score + weight
                        closing = 1 if (u, s) in c.include_edges else 0
                        if (
                            self.lo_len <= len(path)
                            and not self._too_long(len(path))
                            and self.lo_score <= total
                            and (self.hi_score is None or total <= self.hi_score)
                            and seen_vertices == need_vertices
                            and seen_edges + closing == need_edges
                        ):
                            yield ((*path, s) if materialize else None), total
                        continue
                    if w < s or w in on_path or w in c.exclude_vertices:
                        continue
                    grown_vertices = seen_vertices + (1 if w in c.include_vertices else 0)
                    if self._too_long(len(path) + 1 + need_vertices - grown_vertices):
                        continue
                    if self.hi_score is not None and score + weight + self.min_weight > self.hi_score:
                        continue

                    self.budget.tick()
                    path.append(w)
                    weights.append(weight)
                    on_path.add(w)
                    score += weight
                    seen_vertices = grown_vertices
                    if (u, w) in c.include_edges:
                        seen_edges += 1
                    stack.append(iter(graph.successors(w)))
                    descended = True
                    break

                if descended:
                    continue
                stack.pop()
                if len(path) > 1:
                    w = path.pop()
                    weight = weights.pop()
                    on_path.discard(w)
                    score -= weight
                    if w in c.include_vertices:
                        seen_vertices -= 1
                    if (path[-1], w) in c.include_edges:
                        seen_edges -= 1


# ---------------------------------------------------------------------------
# Constrained selection modes
# ---------------------------------------------------------------------------


def iter_cycles(
    graph: Graph,
    constraints: ConstraintSet | None = None,
    *,
    budget: SearchBudget | None = None,
) -> Iterator[Cycle]:
    """Every satisfying simple cycle, lazily, in discovery order."""
    c = constraints or ConstraintSet()
    validate_cycle_constraints(c, graph)
    search = _CycleSearch(graph, c, budget or SearchBudget())
    for vertices, score in search.walk():
        assert vertices is not None
        yield Cycle(vertices, score)


def count_cycles(
    graph: Graph,
    constraints: ConstraintSet | None = None,
    *,
    budget: SearchBudget | None = None,
) -> int:
    """Number of satisfying simple cycles; vertex tuples are never built."""
    c = constraints or ConstraintSet()
    validate_cycle_constraints(c, graph)
    search = _CycleSearch(graph, c, budget or SearchBudget())
    return sum(1 for _ in search.walk(materialize=False))


def shortest_cycle(
    graph: Graph,
    constraints: ConstraintSet | None = None,
    *,
    budget: SearchBudget | None = None,
) -> Cycle | NoSolution:
    """Minimum-length satisfying cycle; ties by score, start, sequence."""
    c = constraints or ConstraintSet()
    validate_cycle_constraints(c, graph)
    search = _CycleSearch(graph, c, budget or SearchBudget())
    best: Cycle | None = None
    for vertices, score in search.walk():
        assert vertices is not None
        found = Cycle(vertices, score)
        if best is None or cycle_sort_key(found) < cycle_sort_key(best):
            best = found
            # Equal lengths may still win on score, so keep the bound inclusive
            search.hi_len = best.length
    return best if best is not None else NoSolution("no cycle satisfies the constraints")


def longest_cycle(
    graph: Graph,
    constraints: ConstraintSet | None = None,
    *,
    budget: SearchBudget | None = None,
) -> Cycle | NoSolution:
    """Maximum-length satisfying cycle; ties by score, start, sequence."""
    best: Cycle | None = None
    best_key: tuple[int, int, int, tuple[int, ...]] | None = None
    for found in iter_cycles(graph, constraints, budget=budget):
        key = (-found.length, found.score, found.start, found.vertices)
        if best_key is None or key < best_key:
            best, best_key = found, key
    return best if best is not None else NoSolution("no cycle satisfies the constraints")


def take_cycles(
    graph: Graph,
    n: int,
    constraints: ConstraintSet | None = None,
    *,
    budget: SearchBudget | None = None,
) -> list[Cycle]:
    """The first *n* satisfying cycles in discovery order."""
    taken: list[Cycle] = []
    if n < 1:
        return taken
    for found in iter_cycles(graph, constraints, budget=budget):
        taken.append(found)
        if len(taken) == n:
            break
    return taken


# ---------------------------------------------------------------------------
# Unconstrained modes
# ---------------------------------------------------------------------------


def girth(graph: Graph, *, budget: SearchBudget | None = None) -> Cycle | NoSolution:
    """Shortest cycle by vertex count, via one BFS per vertex (O(V·E)).

    Among equally short cycles the one found from the lowest start vertex
    wins; the result is returned in canonical rotation.
    """
    budget = budget or SearchBudget()
    best: tuple[int, ...] | None = None

    for s in graph.vertices:
        if graph.has_edge(s, s):
            best = (s, s)
            break
        parent: dict[int, int | None] = {s: None}
        queue: deque[int] = deque([s])
        depth = {s: 0}
        limit = len(best) - 1 if best is not None else None
        closing: int | None = None
        while queue and closing is None:
            u = queue.popleft()
            budget.tick()
            if limit is not None and depth[u] + 1 >= limit:
                break
            for w, _ in graph.successors(u):
                if w == s:
                    closing = u
                    break
                if w not in parent:
                    parent[w] = u
                    depth[w] = depth[u] + 1
                    queue.append(w)
        if closing is None:
            continue

        ring = [closing]
        while (prev := parent[ring[-1]]) is not None:
            ring.append(prev)
        ring.reverse()
        candidate = (*ring, s)
        if best is None or len(candidate) < len(best):
            best = candidate

    if best is None:
        return NoSolution("graph is acyclic")
    score = sum(graph.weight(u, v) or 0 for u, v in zip(best, best[1:], strict=False))
    return Cycle(best, score).canonical()


def hamiltonian_cycle(graph: Graph, *, budget: SearchBudget | None = None) -> Cycle | NoSolution:
    """First Hamiltonian cycle in discovery order, or NoSolution.

    Iterative backtracking from the minimum vertex with a visited bitset.
    A branch is cut when the unvisited vertices are not all reachable from
    the current one, or when none of them can close back to the start.
    """
    budget = budget or SearchBudget()
    vertices = graph.vertices
    if not vertices:
        return NoSolution("graph is empty")
    start = vertices[0]
    if len(vertices) == 1:
        weight = graph.weight(start, start)
        if weight is None:
            return NoSolution("single vertex without a self-loop")
        return Cycle((start, start), weight)

    for v in vertices:
        outs = [w for w, _ in graph.successors(v) if w != v]
        ins = [u for u, _ in graph.predecessors(v) if u != v]
        if not outs or not ins:
            return NoSolution(f"vertex {v} cannot lie on a Hamiltonian cycle")

    index = {v: i for i, v in enumerate(vertices)}
    full = (1 << len(vertices)) - 1
    closers = {u for u, _ in graph.predecessors(start) if u != start}

    def viable(current: int, visited: int) -> bool:
        # BFS over unvisited vertices from the current one
        reached = {current}
        queue: deque[int] = deque([current])
        found_closer = current in closers
        while queue:
            u = queue.popleft()
            for w, _ in graph.successors(u):
                if w in reached or visited & (1 << index[w]):
                    continue
                reached.add(w)
                found_closer = found_closer or w in closers
                queue.append(w)
        return found_closer and len(reached) - 1 == len(vertices) - visited.bit_count()

    path = [start]
    weights: list[int] = []
    visited = 1 << index[start]
    stack = [iter(graph.successors(start))]
    while stack:
        u = path[-1]
        if visited == full:
            closing = graph.weight(u, start)
            if closing is not None:
                logger.debug("hamiltonian.found expansions=%s", budget.expansions)
                return Cycle((*path, start), sum(weights) + closing)
            descended = False
        else:
            descended = False
            for w, weight in stack[-1]:
                bit = 1 << index[w]
                if visited & bit:
                    continue
                budget.tick()
                if not viable(w, visited | bit):
                    continue
                path.append(w)
                weights.append(weight)
                visited |= bit
                stack.append(iter(graph.successors(w)))
                descended = True
                break
        if descended:
            continue
        stack.pop()
        if len(path) > 1:
            visited &= ~(1 << index[path.pop()])
            weights.pop()

    return NoSolution("no Hamiltonian cycle exists")


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def run_cycle_query(
    graph: Graph,
    mode: CycleMode,
    constraints: ConstraintSet | None = None,
    *,
    budget: SearchBudget | None = None,
) -> CycleOutcome:
    """Execute one cycle query for a validated *mode*.

    Returns a :class:`Cycle` or :class:`NoSolution` for single-result modes,
    a list for ``all``/``take`` and an int for ``count``.
    """
    c = constraints or ConstraintSet()
    budget = budget or SearchBudget()
    match mode:
        case ShortestMode():
            return shortest_cycle(graph, c, budget=budget)
        case LongestMode():
            return longest_cycle(graph, c, budget=budget)
        case AllMode():
            return list(iter_cycles(graph, c, budget=budget))
        case CountMode():
            return count_cycles(graph, c, budget=budget)
        case HeadMode():
            first = take_cycles(graph, 1, c, budget=budget)
            return first[0] if first else NoSolution("no cycle satisfies the constraints")
        case TakeMode(n=n):
            return take_cycles(graph, n, c, budget=budget)
        case GirthMode():
            ensure_unconstrained(c, "girth")
            return girth(graph, budget=budget)
        case HamiltonianMode():
            ensure_unconstrained(c, "hamiltonian")
            return hamiltonian_cycle(graph, budget=budget)
        case _:
            msg = f"Unknown cycle mode: {mode!r}"
            raise TypeError(msg)
