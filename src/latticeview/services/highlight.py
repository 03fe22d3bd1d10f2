"""HighlightEngine — depth-1 neighbourhood focus over the visible subset.

The focused set is the focus node plus every node sharing a visible edge
with it; depth is fixed at one hop. Everything else visible is faded.
A focus that is None or not visible yields the neutral (empty) set, so a
filter change can never leave a stale highlight behind.
"""

from __future__ import annotations

from latticeview.domain.models import NEUTRAL_HIGHLIGHT, GraphEdge, HighlightSet, VisibleSubset
from latticeview.infrastructure.graph.engine import GraphEngine


def highlight(
    visible: VisibleSubset,
    focus_node_id: str | None,
    *,
    engine: GraphEngine | None = None,
) -> HighlightSet:
    """Compute the hover highlight for *focus_node_id*.

    Args:
        visible: The current visible subset.
        focus_node_id: Hovered node id, or None.
        engine: Optional prebuilt engine over *visible* to reuse.
    """
    if focus_node_id is None:
        return NEUTRAL_HIGHLIGHT
    visible_ids = visible.node_ids
    if focus_node_id not in visible_ids:
        return NEUTRAL_HIGHLIGHT

    engine = engine or GraphEngine(visible.nodes, visible.edges)
    focused = frozenset({focus_node_id, *engine.neighbors(focus_node_id)})
    return HighlightSet(
        focused_ids=focused,
        faded_ids=visible_ids - focused,
        focus_id=focus_node_id,
    )


def highlighted_edges(visible: VisibleSubset, hl: HighlightSet) -> tuple[GraphEdge, ...]:
    """Edges incident to the focus node; every other edge is faded."""
    if hl.focus_id is None:
        return ()
    return tuple(e for e in visible.edges if e.touches(hl.focus_id))
