"""GraphViewController — owns the model and view state, drives the adapter.

Data flows one way per interaction cycle::

    GraphModel → filter_visible → (highlight, search, plan_layout) → ViewSnapshot
        → RenderAdapter.render → click/hover events → controller intents

Every intent produces a new ViewState (or model) and, unless a
:meth:`batch` is open, one synchronous recomputation. Changing the model,
the visible tiers or the layout kind also starts a relayout with a new
generation; any layout still in flight for an older generation is
discarded when it lands.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator, Iterable
from contextlib import contextmanager
from typing import Any

from latticeview.domain.models import GraphEdge, GraphModel, GraphNode, VisibleSubset
from latticeview.domain.styles import tooltip
from latticeview.domain.types import LayoutKind
from latticeview.domain.view_state import ViewState, Viewport
from latticeview.infrastructure.graph.engine import GraphEngine
from latticeview.plugins.event_bus import EventBus
from latticeview.render.adapter import (
    LayoutResult,
    LayoutTracker,
    RelayoutRequest,
    RenderAdapter,
    ViewSnapshot,
)
from latticeview.services.filtering import filter_visible
from latticeview.services.highlight import highlight
from latticeview.services.layout import plan_layout
from latticeview.services.search import search_matches
from latticeview.services.selection import SelectionController

logger = logging.getLogger(__name__)

EdgeCallback = Callable[[GraphEdge], None]


class GraphViewController:
    """Single owner of GraphModel, ViewState, hover focus and viewport.

    Args:
        adapter: Rendering technology receiving snapshots and relayouts.
        state: Initial view state (all tiers, force layout by default).
        on_node_click: Called with the node after a click selects it.
        on_node_double_click: Called on double-click; selection unchanged.
        on_edge_click: Called with the clicked visible edge.
        event_bus: Optional side-channel for lifecycle and failure events.
    """

    def __init__(
        self,
        adapter: RenderAdapter,
        *,
        state: ViewState | None = None,
        on_node_click: Callable[[GraphNode], None] | None = None,
        on_node_double_click: Callable[[GraphNode], None] | None = None,
        on_edge_click: EdgeCallback | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self._adapter = adapter
        self._state = state or ViewState()
        self._model = GraphModel.empty()
        self._hover: str | None = None
        self._viewport = Viewport()
        self._tracker = LayoutTracker()
        self._on_edge_click = on_edge_click
        self._bus = event_bus
        self._selection = SelectionController(
            initial=self._state.selected_node_id,
            on_node_click=on_node_click,
            on_node_double_click=on_node_double_click,
            on_change=self._selection_changed,
        )

        self._visible = VisibleSubset()
        self._snapshot: ViewSnapshot | None = None
        self._batch_depth = 0
        self._dirty = False
        self._needs_layout = True
        self._in_cycle = False
        self.warnings: list[str] = []

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def model(self) -> GraphModel:
        return self._model

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def visible(self) -> VisibleSubset:
        return self._visible

    @property
    def snapshot(self) -> ViewSnapshot | None:
        return self._snapshot

    @property
    def selection(self) -> SelectionController:
        return self._selection

    @property
    def generation(self) -> int:
        return self._tracker.generation

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    # ------------------------------------------------------------------
    # Intents: data
    # ------------------------------------------------------------------

    def load(self, nodes: Iterable[GraphNode], edges: Iterable[GraphEdge]) -> None:
        """Replace the model wholesale with a new node/edge list."""
        self.set_model(GraphModel.build(nodes, edges))

    def set_model(self, model: GraphModel, *, warnings: list[str] | None = None) -> None:
        self._model = model
        self._emit_event(
            "post_load",
            node_count=len(model.nodes),
            edge_count=len(model.edges),
            warnings=list(warnings or []),
        )
        self._mark(layout=True)

    # ------------------------------------------------------------------
    # Intents: view state
    # ------------------------------------------------------------------

    def toggle_tier(self, tier: str) -> None:
        self._set_state(self._state.toggle_tier(tier), layout=True)

    def set_tiers(self, tiers: Iterable[str]) -> None:
        self._set_state(self._state.with_tiers(tiers), layout=True)

    def set_query(self, query: str) -> None:
        self._set_state(self._state.with_query(query))

    def set_layout(self, kind: LayoutKind | str) -> None:
        self._set_state(self._state.with_layout(kind), layout=True)

    def toggle_labels(self) -> None:
        self._set_state(self._state.toggle_labels())

    def refresh_layout(self) -> None:
        """Re-run the current layout on the visible subset."""
        self._mark(layout=True)

    # --- hover (transient) ---

    def hover(self, node_id: str) -> None:
        if node_id != self._hover:
            self._hover = node_id
            self._mark()

    def unhover(self) -> None:
        if self._hover is not None:
            self._hover = None
            self._mark()

    def tooltip(self) -> dict[str, Any] | None:
        """Hover card for the hovered node, if it is visible."""
        if self._hover is None:
            return None
        node = self._visible.get(self._hover)
        return tooltip(node) if node is not None else None

    # --- selection ---

    def select(self, node_id: str) -> None:
        self._selection.select(node_id)

    def clear_selection(self) -> None:
        self._selection.clear()

    def sync_selection(self, node_id: str | None) -> None:
        """Apply an externally supplied selection id (prop-like input)."""
        self._selection.sync_external(node_id)

    # --- renderer events ---

    def click_node(self, node_id: str) -> None:
        node = self._visible.get(node_id)
        if node is None:
            logger.debug("Ignored click on non-visible node %s", node_id)
            return
        self._selection.click(node)

    def double_click_node(self, node_id: str) -> None:
        node = self._visible.get(node_id)
        if node is None:
            logger.debug("Ignored double-click on non-visible node %s", node_id)
            return
        self._selection.double_click(node)

    def click_edge(self, source: str, target: str) -> None:
        for edge in self._visible.edges:
            if edge.source == source and edge.target == target:
                if self._on_edge_click is not None:
                    self._on_edge_click(edge)
                return
        logger.debug("Ignored click on non-visible edge %s-%s", source, target)

    # --- viewport ---

    def zoom_in(self) -> None:
        self._set_viewport(self._viewport.zoom_in())

    def zoom_out(self) -> None:
        self._set_viewport(self._viewport.zoom_out())

    def fit(self) -> None:
        self._set_viewport(self._viewport.fit())

    # ------------------------------------------------------------------
    # Batching and layout delivery
    # ------------------------------------------------------------------

    @contextmanager
    def batch(self) -> Generator[GraphViewController]:
        """Collapse every intent inside the block into one recomputation."""
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self.recompute()

    def poll(self) -> int:
        """Let an asynchronous adapter deliver finished layouts."""
        poll = getattr(self._adapter, "poll", None)
        if poll is None:
            return 0
        return int(poll())

    def recompute(self) -> ViewSnapshot:
        """Rebuild derived views, start a relayout if needed, and render."""
        self._in_cycle = True
        try:
            self._visible = filter_visible(self._model, self._state.filter_tiers)
            if self._needs_layout:
                self._needs_layout = False
                self._request_layout()
            snapshot = self._build_snapshot()
        finally:
            self._in_cycle = False
            self._dirty = False
        self._render(snapshot)
        return snapshot

    def _request_layout(self) -> None:
        generation = self._tracker.next_generation()
        request = RelayoutRequest(
            generation=generation,
            visible=self._visible,
            plan=plan_layout(self._state.layout_kind, self._visible),
        )
        logger.debug(
            "Relayout generation %d (%s, %d nodes)",
            generation,
            self._state.layout_kind,
            len(self._visible.nodes),
        )
        try:
            self._adapter.relayout(request, self._deliver)
        except Exception as exc:
            self._deliver(LayoutResult(generation=generation, error=str(exc) or type(exc).__name__))

    def _deliver(self, result: LayoutResult) -> None:
        accepted = self._tracker.accept(result)
        if not self._tracker.is_current(result.generation):
            return
        kind = str(self._state.layout_kind)
        if accepted:
            self._emit_event(
                "post_relayout",
                generation=result.generation,
                layout_kind=kind,
                node_count=len(result.positions),
            )
        else:
            logger.warning(
                "Relayout generation %d failed, keeping previous layout: %s",
                result.generation,
                result.error,
            )
            self.warnings.append(f"Relayout failed: {result.error or 'unknown error'}")
            self._emit_event(
                "relayout_failed",
                generation=result.generation,
                layout_kind=kind,
                error=result.error or "unknown error",
            )
        if self._batch_depth > 0:
            self._dirty = True
        elif not self._in_cycle:
            self._render(self._build_snapshot())

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _set_state(self, state: ViewState, *, layout: bool = False) -> None:
        if state == self._state:
            return
        self._state = state
        self._mark(layout=layout)

    def _set_viewport(self, viewport: Viewport) -> None:
        if viewport != self._viewport:
            self._viewport = viewport
            self._mark()

    def _mark(self, *, layout: bool = False) -> None:
        self._dirty = True
        self._needs_layout = self._needs_layout or layout
        if self._batch_depth == 0 and not self._in_cycle:
            self.recompute()

    def _selection_changed(self, node_id: str | None) -> None:
        self._state = self._state.with_selection(node_id)
        self._emit_event("post_select", node_id=node_id)
        self._mark()

    def _build_snapshot(self) -> ViewSnapshot:
        visible = self._visible
        engine = GraphEngine(visible.nodes, visible.edges)
        selected = self._selection.selected_id
        return ViewSnapshot(
            generation=self._tracker.generation,
            visible=visible,
            hover=highlight(visible, self._hover, engine=engine),
            search_ids=search_matches(visible, self._state.search_query),
            plan=plan_layout(self._state.layout_kind, visible),
            selected_id=selected,
            selection_rendered=self._selection.is_rendered(visible),
            labels_visible=self._state.labels_visible,
            controls_visible=self._state.controls_visible,
            viewport=self._viewport,
            positions=self._tracker.positions,
            layout_pending=self._tracker.pending,
            stats=self._model.stats(),
        )

    def _render(self, snapshot: ViewSnapshot) -> None:
        self._snapshot = snapshot
        try:
            self._adapter.render(snapshot)
        except Exception as exc:
            logger.warning("Render adapter failed: %s", exc, exc_info=True)
            self.warnings.append(f"Render failed: {exc}")
            return
        self._emit_event(
            "post_snapshot",
            generation=snapshot.generation,
            node_count=len(snapshot.visible.nodes),
            edge_count=len(snapshot.visible.edges),
            focused=len(snapshot.hover.focused_ids),
            matched=len(snapshot.search_ids),
        )

    def _emit_event(self, hook_name: str, **payload: Any) -> None:
        if self._bus is None:
            return
        warning = self._bus.dispatch(hook_name, **payload)
        if warning:
            self.warnings.append(warning)
