"""Tests for the networkx layout adapter."""

from __future__ import annotations

import math
import threading
import time

import pytest

from latticeview.domain.models import GraphModel, VisibleSubset
from latticeview.domain.types import ALL_TIERS, LayoutKind
from latticeview.infrastructure.graph.engine import GraphEngine
from latticeview.render.adapter import LayoutResult, Positions, RelayoutRequest
from latticeview.render.networkx_adapter import (
    NetworkxLayoutAdapter,
    concentric_shells,
    grid_positions,
    hierarchy_layers,
)
from latticeview.services.controller import GraphViewController
from latticeview.services.filtering import filter_visible
from latticeview.services.layout import plan_layout
from tests.conftest import make_edge, make_node


def _request(
    visible: VisibleSubset, kind: LayoutKind | str, generation: int = 1
) -> RelayoutRequest:
    return RelayoutRequest(generation=generation, visible=visible, plan=plan_layout(kind, visible))


class TestHelpers:
    def test_grid_positions(self) -> None:
        pos = grid_positions(["a", "b", "c", "d", "e"])
        assert len(pos) == 5
        assert len({p[1] for p in pos.values()}) == 2
        assert pos["a"][1] == pos["b"][1] == pos["c"][1]
        assert grid_positions([]) == {}

    def test_hierarchy_layers(self) -> None:
        engine = GraphEngine(
            [make_node(n) for n in "abcde"],
            [make_edge("a", "b"), make_edge("b", "c"), make_edge("a", "d")],
        )
        layers = hierarchy_layers(engine.graph)
        assert layers == {"a": 0, "b": 1, "d": 1, "c": 2, "e": 0}

    def test_hierarchy_cycle_rooted_at_smallest(self) -> None:
        engine = GraphEngine(
            [make_node("x"), make_node("y")], [make_edge("x", "y"), make_edge("y", "x")]
        )
        assert hierarchy_layers(engine.graph) == {"x": 0, "y": 1}

    def test_concentric_shells(self) -> None:
        visible = VisibleSubset(
            nodes=(
                make_node("a", resonance=0.9),
                make_node("b", resonance=0.2),
                make_node("c"),
            )
        )
        assert concentric_shells(visible) == [["c", "a", "b"]]
        narrow = concentric_shells(visible, level_width=0.5)
        assert narrow == [["c", "a"], ["b"]]


class TestCompute:
    @pytest.mark.parametrize("kind", list(LayoutKind))
    def test_every_kind_positions_every_visible_node(
        self, kind: LayoutKind, sample_model: GraphModel
    ) -> None:
        visible = filter_visible(sample_model, ALL_TIERS)
        positions = NetworkxLayoutAdapter().compute(_request(visible, kind))
        assert set(positions) == visible.node_ids
        assert all(
            isinstance(x, float) and isinstance(y, float) and math.isfinite(x) and math.isfinite(y)
            for x, y in positions.values()
        )

    @pytest.mark.parametrize("kind", list(LayoutKind))
    def test_single_node(self, kind: LayoutKind) -> None:
        visible = VisibleSubset(nodes=(make_node("solo"),))
        assert set(NetworkxLayoutAdapter().compute(_request(visible, kind))) == {"solo"}

    def test_empty_subset(self) -> None:
        assert NetworkxLayoutAdapter().compute(_request(VisibleSubset(), "force")) == {}

    def test_force_is_seeded(self, sample_model: GraphModel) -> None:
        visible = filter_visible(sample_model, ALL_TIERS)
        first = NetworkxLayoutAdapter(seed=7).compute(_request(visible, "force"))
        second = NetworkxLayoutAdapter(seed=7).compute(_request(visible, "force"))
        assert first == second

    def test_hierarchy_layers_are_horizontal_rows(self, sample_model: GraphModel) -> None:
        visible = filter_visible(sample_model, ALL_TIERS)
        pos = NetworkxLayoutAdapter().compute(_request(visible, "hierarchy"))
        assert len({round(y, 6) for _, y in pos.values()}) == 4

    def test_sync_relayout_delivers(self, sample_model: GraphModel) -> None:
        visible = filter_visible(sample_model, ALL_TIERS)
        delivered: list[LayoutResult] = []
        NetworkxLayoutAdapter().relayout(_request(visible, "circle", 3), delivered.append)
        assert len(delivered) == 1
        assert delivered[0].generation == 3
        assert delivered[0].ok

    def test_compute_error_delivered_as_failure(self, sample_model: GraphModel) -> None:
        class Broken(NetworkxLayoutAdapter):
            def compute(self, request: RelayoutRequest) -> Positions:
                raise ValueError("singular matrix")

        delivered: list[LayoutResult] = []
        visible = filter_visible(sample_model, ALL_TIERS)
        Broken().relayout(_request(visible, "force"), delivered.append)
        assert delivered[0].error == "singular matrix"


class TestThreaded:
    def test_drain_delivers_latest(self, sample_model: GraphModel) -> None:
        adapter = NetworkxLayoutAdapter(sync=False)
        ctl = GraphViewController(adapter)
        try:
            ctl.set_model(sample_model)
            snap = ctl.snapshot
            assert snap is not None and snap.layout_pending is True
            ctl.set_layout("circle")
            adapter.drain()
            snap = ctl.snapshot
            assert snap is not None
            assert snap.layout_pending is False
            assert snap.generation == 2
            assert set(snap.positions) == {"A", "B", "C", "D"}
        finally:
            adapter.shutdown()

    def test_poll_via_controller(self, sample_model: GraphModel) -> None:
        adapter = NetworkxLayoutAdapter(sync=False)
        ctl = GraphViewController(adapter)
        try:
            ctl.set_model(sample_model)
            for _req, future, _sink, _started in list(adapter._inflight):
                future.result(timeout=30)
            assert ctl.poll() == 1
            snap = ctl.snapshot
            assert snap is not None and snap.layout_pending is False
        finally:
            adapter.shutdown()

    def test_layout_delivered_inside_batch_renders_on_exit(self, sample_model: GraphModel) -> None:
        adapter = NetworkxLayoutAdapter(sync=False)
        ctl = GraphViewController(adapter)
        try:
            ctl.set_model(sample_model)
            for _req, future, _sink, _started in list(adapter._inflight):
                future.result(timeout=30)
            with ctl.batch():
                assert ctl.poll() == 1
            snap = ctl.snapshot
            assert snap is not None and snap.layout_pending is False
            assert set(snap.positions) == {"A", "B", "C", "D"}
        finally:
            adapter.shutdown()

    def test_timeout_is_a_failure(self, sample_model: GraphModel) -> None:
        release = threading.Event()

        class Slow(NetworkxLayoutAdapter):
            def compute(self, request: RelayoutRequest) -> Positions:
                release.wait(timeout=5)
                return {}

        adapter = Slow(sync=False, timeout=0.0)
        delivered: list[LayoutResult] = []
        try:
            visible = filter_visible(sample_model, ALL_TIERS)
            adapter.relayout(_request(visible, "force"), delivered.append)
            time.sleep(0.01)
            assert adapter.poll() == 1
            assert delivered[0].error is not None
            assert "timed out" in delivered[0].error
        finally:
            release.set()
            adapter.shutdown()
