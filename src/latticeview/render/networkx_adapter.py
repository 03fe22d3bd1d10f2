"""NetworkxLayoutAdapter — server-side positions via networkx layouts.

Maps each layout kind onto a networkx drawing routine:

- force       → ``spring_layout`` (Fruchterman-Reingold, edge weight aware)
- circle      → ``circular_layout``
- grid        → row-major grid, ``ceil(sqrt(n))`` columns
- hierarchy   → ``multipartite_layout`` over BFS layers from source nodes
- concentric  → ``shell_layout`` with shells banded by resonance

With ``sync=True`` (default) results are delivered inside ``relayout``.
Otherwise layouts run on a thread pool and :meth:`poll` delivers finished
results on the caller's thread; a new request cancels queued ones and
results that exceed ``timeout`` are delivered as failures.
"""

from __future__ import annotations

import logging
import math
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

import networkx as nx

from latticeview.domain.models import VisibleSubset
from latticeview.domain.types import LayoutKind
from latticeview.infrastructure.graph.engine import GraphEngine
from latticeview.render.adapter import LayoutResult, LayoutSink, Positions, RelayoutRequest
from latticeview.render.elements import ElementsAdapter

logger = logging.getLogger(__name__)


def _as_positions(raw: dict[Any, Any]) -> Positions:
    return {str(n): (round(float(p[0]), 6), round(float(p[1]), 6)) for n, p in raw.items()}


def grid_positions(node_ids: list[str], *, scale: float = 1.0) -> Positions:
    """Row-major grid centred on the origin."""
    if not node_ids:
        return {}
    cols = math.ceil(math.sqrt(len(node_ids)))
    rows = math.ceil(len(node_ids) / cols)
    step = 2 * scale / max(cols, rows, 2)
    x0 = -step * (cols - 1) / 2
    y0 = step * (rows - 1) / 2
    return {
        nid: (round(x0 + (i % cols) * step, 6), round(y0 - (i // cols) * step, 6))
        for i, nid in enumerate(node_ids)
    }


def hierarchy_layers(g: nx.MultiDiGraph) -> dict[str, int]:
    """BFS depth of every node, rooted at nodes with no incoming edges.

    Components without such a node (cycles) are rooted at their smallest id.
    """
    layers: dict[str, int] = {}
    ug = g.to_undirected(as_view=True)
    for component in nx.weakly_connected_components(g):
        roots = sorted(n for n in component if g.in_degree(n) == 0) or [min(component)]
        for depth, layer in enumerate(nx.bfs_layers(ug.subgraph(component), roots)):
            for node in layer:
                layers[node] = depth
    return layers


def concentric_shells(
    visible: VisibleSubset,
    *,
    attribute: str = "resonance",
    default: float = 1.0,
    level_width: float = 2.0,
) -> list[list[str]]:
    """Group nodes into rings, highest score innermost.

    Nodes whose scores fall within *level_width* of the ring's top score
    share a ring.
    """
    scored = sorted(
        ((getattr(n, attribute, None) or default, n.id) for n in visible.nodes),
        key=lambda item: (-item[0], item[1]),
    )
    shells: list[list[str]] = []
    top: float | None = None
    for score, node_id in scored:
        if top is None or top - score >= level_width:
            shells.append([])
            top = score
        shells[-1].append(node_id)
    return shells


class NetworkxLayoutAdapter(ElementsAdapter):
    """Element adapter that also computes positions with networkx."""

    def __init__(
        self,
        *,
        seed: int = 42,
        scale: float = 1.0,
        sync: bool = True,
        max_workers: int = 1,
        timeout: float | None = None,
    ) -> None:
        super().__init__()
        self._seed = seed
        self._scale = scale
        self._timeout = timeout
        self._executor: ThreadPoolExecutor | None = (
            None if sync else ThreadPoolExecutor(max_workers=max_workers)
        )
        self._inflight: list[tuple[RelayoutRequest, Future[Positions], LayoutSink, float]] = []

    # ------------------------------------------------------------------
    # RenderAdapter
    # ------------------------------------------------------------------

    def relayout(self, request: RelayoutRequest, deliver: LayoutSink) -> None:
        if self._executor is None:
            deliver(self._run(request))
            return

        # A newer request supersedes anything that has not started yet.
        for _req, future, _sink, _started in self._inflight:
            future.cancel()
        future = self._executor.submit(self.compute, request)
        self._inflight.append((request, future, deliver, time.monotonic()))

    # ------------------------------------------------------------------
    # Async delivery
    # ------------------------------------------------------------------

    def poll(self) -> int:
        """Deliver finished (or timed-out) layouts. Returns how many were delivered."""
        delivered = 0
        remaining: list[tuple[RelayoutRequest, Future[Positions], LayoutSink, float]] = []
        now = time.monotonic()
        for request, future, sink, started in self._inflight:
            if future.cancelled():
                continue
            if future.done():
                exc = future.exception()
                if exc is not None:
                    sink(LayoutResult(generation=request.generation, error=str(exc)))
                else:
                    sink(LayoutResult(generation=request.generation, positions=future.result()))
                delivered += 1
            elif self._timeout is not None and now - started > self._timeout:
                future.cancel()
                sink(
                    LayoutResult(
                        generation=request.generation,
                        error=f"layout timed out after {self._timeout}s",
                    )
                )
                delivered += 1
            else:
                remaining.append((request, future, sink, started))
        self._inflight = remaining
        return delivered

    def drain(self, timeout: float = 30.0) -> int:
        """Block until every in-flight layout settles, then deliver them."""
        for _req, future, _sink, _started in self._inflight:
            if future.cancelled():
                continue
            try:
                future.result(timeout=timeout)
            except Exception:  # noqa: BLE001
                logger.debug("Layout future failed", exc_info=True)
        return self.poll()

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True, cancel_futures=True)
            self._executor = None
        self._inflight.clear()

    # ------------------------------------------------------------------
    # Layout computation
    # ------------------------------------------------------------------

    def _run(self, request: RelayoutRequest) -> LayoutResult:
        try:
            positions = self.compute(request)
        except Exception as exc:  # noqa: BLE001
            logger.debug("Layout generation %d failed", request.generation, exc_info=True)
            return LayoutResult(generation=request.generation, error=str(exc))
        return LayoutResult(generation=request.generation, positions=positions)

    def compute(self, request: RelayoutRequest) -> Positions:
        """Compute positions for the request's visible subset."""
        visible = request.visible
        if visible.is_empty:
            return {}

        kind = request.plan.params.kind
        engine = GraphEngine(visible.nodes, visible.edges)
        ids = [n.id for n in visible.nodes]

        if kind is LayoutKind.CIRCLE:
            raw = nx.circular_layout(engine.undirected(), scale=self._scale)
        elif kind is LayoutKind.GRID:
            return grid_positions(ids, scale=self._scale)
        elif kind is LayoutKind.HIERARCHY:
            g = nx.DiGraph(engine.graph)
            nx.set_node_attributes(g, hierarchy_layers(engine.graph), "layer")
            raw = nx.multipartite_layout(
                g, subset_key="layer", align="horizontal", scale=self._scale
            )
        elif kind is LayoutKind.CONCENTRIC:
            options = request.plan.params.options
            shells = concentric_shells(
                visible,
                attribute=options.get("concentricBy", "resonance"),
                default=options.get("concentricDefault", 1),
                level_width=options.get("levelWidth", 2),
            )
            raw = nx.shell_layout(engine.undirected(), nlist=shells, scale=self._scale)
        else:
            raw = nx.spring_layout(
                engine.undirected(), seed=self._seed, scale=self._scale, weight="weight"
            )
        return _as_positions(raw)
