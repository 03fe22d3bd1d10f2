"""SelectionController — reconciles external and click-driven selection.

Two inputs drive it: the externally supplied id (a prop-like value that
may change at any time) and click events from the renderer. The last
input wins. Ids are not validated against the model; a selection that
is not yet loaded, or currently filtered out, stays selected and simply
is not drawn.

Double-click is a separate drill-in signal and leaves selection alone.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from latticeview.domain.models import GraphModel, GraphNode, VisibleSubset
from latticeview.domain.selection import SelectionStatus, is_valid_transition

logger = logging.getLogger(__name__)

NodeCallback = Callable[[GraphNode], None]


class SelectionController:
    """``Unselected`` / ``Selected(id)`` state machine."""

    def __init__(
        self,
        *,
        initial: str | None = None,
        on_node_click: NodeCallback | None = None,
        on_node_double_click: NodeCallback | None = None,
        on_change: Callable[[str | None], None] | None = None,
    ) -> None:
        self._selected: str | None = initial
        self._external: str | None = initial
        self._on_node_click = on_node_click
        self._on_node_double_click = on_node_double_click
        self._on_change = on_change

    @property
    def status(self) -> SelectionStatus:
        return SelectionStatus.SELECTED if self._selected is not None else SelectionStatus.UNSELECTED

    @property
    def selected_id(self) -> str | None:
        return self._selected

    def select(self, node_id: str) -> None:
        """Enter ``Selected(node_id)``; re-selecting the same id is a no-op."""
        self._transition(node_id)

    def clear(self) -> None:
        self._transition(None)

    def sync_external(self, node_id: str | None) -> None:
        """Apply the externally supplied id when it changes.

        An unchanged external value does not override a later click; a new
        value always wins, and None clears the selection.
        """
        if node_id == self._external:
            return
        self._external = node_id
        self._transition(node_id)

    def click(self, node: GraphNode) -> None:
        self._transition(node.id)
        if self._on_node_click is not None:
            self._on_node_click(node)

    def double_click(self, node: GraphNode) -> None:
        if self._on_node_double_click is not None:
            self._on_node_double_click(node)

    def is_rendered(self, scope: GraphModel | VisibleSubset) -> bool:
        """Whether the selected node exists in *scope* and can be drawn."""
        if self._selected is None:
            return False
        if isinstance(scope, GraphModel):
            return scope.contains(self._selected)
        return self._selected in scope.node_ids

    def _transition(self, node_id: str | None) -> None:
        target = SelectionStatus.UNSELECTED if node_id is None else SelectionStatus.SELECTED
        if not is_valid_transition(self.status, target):
            logger.debug("Ignored selection transition %s -> %s", self.status, target)
            return
        if node_id == self._selected:
            return
        self._selected = node_id
        logger.debug("Selection changed: %s", node_id)
        if self._on_change is not None:
            self._on_change(node_id)
