"""Tests for cytoscape element serialisation and the ElementsAdapter."""

from __future__ import annotations

from typing import Any

import pytest

from latticeview.domain.models import GraphModel
from latticeview.render.adapter import LayoutResult, RelayoutRequest, ViewSnapshot
from latticeview.render.elements import SEARCH_CLASS, ElementsAdapter, build_elements
from latticeview.services.controller import GraphViewController
from latticeview.services.layout import plan_layout


@pytest.fixture
def controller(sample_model: GraphModel) -> GraphViewController:
    ctl = GraphViewController(ElementsAdapter())
    ctl.set_model(sample_model)
    return ctl


def _snapshot(ctl: GraphViewController) -> ViewSnapshot:
    assert ctl.snapshot is not None
    return ctl.snapshot


def _nodes(elements: list[dict[str, Any]]) -> dict[str, dict[str, Any]]:
    return {e["data"]["id"]: e for e in elements if e["group"] == "nodes"}


def _edges(elements: list[dict[str, Any]]) -> dict[str, dict[str, Any]]:
    return {e["data"]["id"]: e for e in elements if e["group"] == "edges"}


class TestBuildElements:
    def test_node_data(self, controller: GraphViewController) -> None:
        nodes = _nodes(build_elements(_snapshot(controller)))
        c = nodes["C"]["data"]
        assert c["color"] == "#a855f7"
        assert c["size"] == 50
        assert c["label"] == "Gamma lattice"
        assert c["resonance"] == 0.9
        assert c["tooltip"]["caption"] == "Hyper DTU"
        assert "resonance" not in nodes["D"]["data"]
        assert nodes["C"]["classes"] == ""
        assert nodes["C"]["selected"] is False

    def test_edge_data(self, controller: GraphViewController) -> None:
        edges = _edges(build_elements(_snapshot(controller)))
        assert set(edges) == {"A-B", "B-C", "C-D"}
        assert edges["B-C"]["data"]["width"] == 4.0
        assert edges["B-C"]["data"]["type"] == "cites"
        assert edges["A-B"]["classes"] == ""

    def test_hover_classes(self, controller: GraphViewController) -> None:
        controller.hover("B")
        elements = build_elements(_snapshot(controller))
        nodes = _nodes(elements)
        assert nodes["B"]["classes"] == "highlighted"
        assert nodes["D"]["classes"] == "faded"
        edges = _edges(elements)
        assert edges["A-B"]["classes"] == "highlighted"
        assert edges["C-D"]["classes"] == "faded"

    def test_search_layer_is_separate(self, controller: GraphViewController) -> None:
        controller.set_query("delta")
        controller.hover("A")
        nodes = _nodes(build_elements(_snapshot(controller)))
        assert nodes["D"]["classes"].split() == ["faded", SEARCH_CLASS]
        assert nodes["A"]["classes"] == "highlighted"

    def test_labels_hidden(self, controller: GraphViewController) -> None:
        controller.toggle_labels()
        nodes = _nodes(build_elements(_snapshot(controller)))
        assert all(n["data"]["label"] == "" for n in nodes.values())

    def test_selected_flag(self, controller: GraphViewController) -> None:
        controller.select("A")
        nodes = _nodes(build_elements(_snapshot(controller)))
        assert nodes["A"]["selected"] is True
        assert nodes["B"]["selected"] is False

    def test_only_visible(self, controller: GraphViewController) -> None:
        controller.set_tiers(["mega", "hyper"])
        elements = build_elements(_snapshot(controller))
        assert set(_nodes(elements)) == {"B", "C"}
        assert set(_edges(elements)) == {"B-C"}

    def test_no_positions_from_client_side_layout(self, controller: GraphViewController) -> None:
        nodes = _nodes(build_elements(_snapshot(controller)))
        assert all("position" not in n for n in nodes.values())


class TestElementsAdapter:
    def test_records_frames(self, sample_model: GraphModel) -> None:
        adapter = ElementsAdapter()
        ctl = GraphViewController(adapter)
        ctl.set_model(sample_model)
        ctl.set_query("alpha")
        assert adapter.frames >= 2
        assert adapter.snapshot is ctl.snapshot
        assert len(adapter.elements) == 7

    def test_relayout_acknowledges_immediately(self, controller: GraphViewController) -> None:
        snap = _snapshot(controller)
        delivered: list[LayoutResult] = []
        request = RelayoutRequest(
            generation=7, visible=snap.visible, plan=plan_layout("grid", snap.visible)
        )
        ElementsAdapter().relayout(request, delivered.append)
        assert delivered == [LayoutResult(generation=7)]
        assert snap.layout_pending is False
