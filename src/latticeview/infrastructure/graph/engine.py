"""GraphEngine — lazy-built NetworkX graph over a node/edge snapshot.

Built once per snapshot and discarded with it; a new ``GraphModel`` or a
new visible subset gets a new engine. Callers that never ask for
neighbourhoods never pay for the build.
"""

from __future__ import annotations

from collections.abc import Iterable

import networkx as nx

from latticeview.domain.models import GraphEdge, GraphNode

type _Graph = nx.MultiDiGraph


class GraphEngine:
    """Lazy-loading graph engine backed by immutable node and edge tuples."""

    def __init__(self, nodes: Iterable[GraphNode], edges: Iterable[GraphEdge]) -> None:
        self._nodes = tuple(nodes)
        self._edges = tuple(edges)
        self._graph: _Graph | None = None

    @property
    def graph(self) -> _Graph:
        """Return the graph, building it on first access."""
        if self._graph is None:
            self._graph = self._build()
        return self._graph

    def invalidate(self) -> None:
        """Clear the cached graph, forcing a rebuild on next access."""
        self._graph = None

    def neighbors(self, node_id: str) -> set[str]:
        """Depth-1 neighbourhood of *node_id*, ignoring edge direction."""
        g = self.graph
        if node_id not in g:
            return set()
        return {n for n in nx.all_neighbors(g, node_id) if n != node_id}

    def degree(self, node_id: str) -> int:
        """Number of distinct neighbours of *node_id*."""
        return len(self.neighbors(node_id))

    def undirected(self) -> nx.Graph:
        """Simple undirected copy, used by layout algorithms."""
        return nx.Graph(self.graph.to_undirected(as_view=True))

    def _build(self) -> _Graph:
        """Build a MultiDiGraph from the node and edge tuples.

        Nodes are added first so isolated nodes are visible to algorithms.
        Edges whose endpoints are not among the nodes are skipped rather
        than letting networkx invent bare nodes for them.
        """
        g: _Graph = nx.MultiDiGraph()
        for node in self._nodes:
            g.add_node(
                node.id,
                label=node.label,
                tier=node.tier,
                resonance=node.resonance,
            )
        for edge in self._edges:
            if edge.source not in g or edge.target not in g:
                continue
            g.add_edge(edge.source, edge.target, weight=edge.weight, edge_type=edge.type)
        return g
