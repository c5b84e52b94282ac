# src/cells/dependency_graph.py — v1
"""Cell dependency graph — directed NetworkX graph built from manifests.

Nodes are Cell ids (``kind="cell"``) and external dependencies such as
libraries (``kind="external"``). An edge ``a -> b`` means Cell ``a``
declares ``b`` in its ``dependencies``.
"""

from __future__ import annotations

import logging
from typing import Mapping

import networkx as nx

from cellgov.cells.models import CellManifest

logger = logging.getLogger(__name__)


def build_dependency_graph(manifests: Mapping[str, CellManifest]) -> nx.DiGraph:
    """Build the dependency graph.

    Args:
        manifests: Schema-valid manifests keyed by Cell location.

    Returns:
        DiGraph with one node per Cell id and per external dependency.
    """
    graph = nx.DiGraph()
    for location, manifest in manifests.items():
        graph.add_node(
            manifest.id, kind="cell", location=location, version=manifest.version
        )

    for manifest in manifests.values():
        for dep in manifest.dependencies:
            if dep not in graph:
                graph.add_node(dep, kind="external")
            graph.add_edge(manifest.id, dep)

    logger.debug(
        "Dependency graph: %d nodes, %d edges",
        graph.number_of_nodes(),
        graph.number_of_edges(),
    )
    return graph


def find_cycles(graph: nx.DiGraph) -> list[list[str]]:
    """Return dependency cycles among Cells.

    Each cycle is rotated to start at its smallest id; the list is sorted.
    """
    cycles: list[list[str]] = []
    for cycle in nx.simple_cycles(graph):
        start = cycle.index(min(cycle))
        cycles.append(cycle[start:] + cycle[:start])
    return sorted(cycles)


def impacted_cells(graph: nx.DiGraph, node_id: str) -> list[str]:
    """Cells that depend on node_id, directly or transitively (sorted)."""
    if node_id not in graph:
        return []
    return sorted(
        n for n in nx.ancestors(graph, node_id) if graph.nodes[n].get("kind") == "cell"
    )
