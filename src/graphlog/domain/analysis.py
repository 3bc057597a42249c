"""Whole-graph analysis backed by networkx: topological order and statistics."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import networkx as nx

from graphlog.domain.errors import CycleDetected

if TYPE_CHECKING:
    from graphlog.domain.graph import Graph


def topo_sort(graph: Graph) -> list[int]:
    """Lexicographically smallest topological order (ties by lowest id).

    Raises:
        CycleDetected: if the graph has a directed cycle; carries a witness.
    """
    g = graph.to_networkx()
    try:
        return list(nx.lexicographical_topological_sort(g))
    except nx.NetworkXUnfeasible:
        witness = [u for u, _ in nx.find_cycle(g)]
        witness.append(witness[0])
        msg = f"Graph has a cycle: {' -> '.join(str(v) for v in witness)}"
        raise CycleDetected(msg, cycle=witness) from None


def describe(graph: Graph) -> dict[str, Any]:
    """Counts, density, sources/sinks, weak components and acyclicity."""
    g = graph.to_networkx()
    components = sorted(
        (sorted(comp) for comp in nx.weakly_connected_components(g)),
        key=lambda comp: comp[0],
    )
    self_loops = sorted(u for u, _ in nx.selfloop_edges(g))
    return {
        "vertices": graph.vertex_count,
        "edges": graph.edge_count,
        "density": round(nx.density(g), 6) if graph.vertex_count else 0.0,
        "sources": [v for v in graph.vertices if graph.in_degree(v) == 0],
        "sinks": [v for v in graph.vertices if graph.out_degree(v) == 0],
        "components": len(components),
        "component_sizes": [len(comp) for comp in components],
        "self_loops": self_loops,
        "is_acyclic": nx.is_directed_acyclic_graph(g),
        "min_weight": graph.min_weight,
    }
