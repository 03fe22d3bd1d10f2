"""ViewFilter — tier inclusion followed by edge validity.

Pure and total: an empty tier set gives an empty subset, unknown tiers
never match, and edges with an endpoint outside the kept nodes (including
edges that reference ids the model never had) are dropped.
"""

from __future__ import annotations

from collections.abc import Iterable

from latticeview.domain.models import GraphModel, VisibleSubset


def filter_visible(model: GraphModel, filter_tiers: Iterable[str]) -> VisibleSubset:
    """Return the nodes whose tier is in *filter_tiers* and the edges between them."""
    tiers = frozenset(filter_tiers)
    if not tiers:
        return VisibleSubset()

    nodes = tuple(n for n in model.nodes if n.tier in tiers)
    kept = {n.id for n in nodes}
    edges = tuple(e for e in model.edges if e.source in kept and e.target in kept)
    return VisibleSubset(nodes=nodes, edges=edges)
