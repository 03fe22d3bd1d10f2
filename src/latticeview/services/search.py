"""Search matching over node labels.

An empty query matches nothing: search highlighting stays inert until
something is typed. Matches form their own highlight layer and are never
merged with the hover neighbourhood.
"""

from __future__ import annotations

from latticeview.domain.models import GraphNode, VisibleSubset


def matches(node: GraphNode, query: str) -> bool:
    """Case-insensitive substring match against ``label`` only."""
    if not query:
        return False
    return query.casefold() in node.label.casefold()


def search_matches(visible: VisibleSubset, query: str) -> frozenset[str]:
    """Ids of visible nodes whose label matches *query*."""
    if not query:
        return frozenset()
    return frozenset(n.id for n in visible.nodes if matches(n, query))
