"""Shared pytest fixtures and test helpers for latticeview tests."""

from __future__ import annotations

import json
import os
import random
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from latticeview.domain.models import GraphEdge, GraphModel, GraphNode
from latticeview.domain.types import Tier
from latticeview.services.telemetry import _active, disable_telemetry

# A -(1)- B -(2)- C -(1)- D, one node per tier.
SAMPLE_NODES: list[dict[str, Any]] = [
    {"id": "A", "label": "Alpha signal", "tier": "regular", "resonance": 0.2},
    {"id": "B", "label": "Beta lattice", "tier": "mega", "resonance": 0.6},
    {"id": "C", "label": "Gamma lattice", "tier": "hyper", "resonance": 0.9},
    {"id": "D", "label": "Delta shadow", "tier": "shadow"},
]
SAMPLE_EDGES: list[dict[str, Any]] = [
    {"source": "A", "target": "B"},
    {"source": "B", "target": "C", "weight": 2.0, "type": "cites"},
    {"source": "C", "target": "D"},
]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's latticeview.toml or LATTICEVIEW_* vars out of tests."""
    for var in list(os.environ):
        if var.startswith("LATTICEVIEW_"):
            monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    yield
    disable_telemetry()
    _active.set(None)


@pytest.fixture
def sample_model() -> GraphModel:
    """Four nodes, one per tier, chained A-B-C-D."""
    return GraphModel.build(
        [GraphNode.model_validate(n) for n in SAMPLE_NODES],
        [GraphEdge.model_validate(e) for e in SAMPLE_EDGES],
    )


@pytest.fixture
def dataset_file(tmp_path: Path) -> Path:
    """The sample graph written as a JSON dataset."""
    path = tmp_path / "graph.json"
    path.write_text(json.dumps({"nodes": SAMPLE_NODES, "edges": SAMPLE_EDGES}), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_node(node_id: str, tier: str = "regular", label: str | None = None, **kw: Any) -> GraphNode:
    return GraphNode(id=node_id, label=label if label is not None else node_id, tier=tier, **kw)


def make_edge(source: str, target: str, **kw: Any) -> GraphEdge:
    return GraphEdge(source=source, target=target, **kw)


def random_model(seed: int, *, nodes: int = 40, edges: int = 80) -> GraphModel:
    """Seeded random graph over all four tiers, with a few dangling edges."""
    rng = random.Random(seed)
    tiers = [t.value for t in Tier]
    graph_nodes = [make_node(f"n{i}", rng.choice(tiers)) for i in range(nodes)]
    ids = [n.id for n in graph_nodes] + ["ghost-1", "ghost-2"]
    graph_edges = [make_edge(rng.choice(ids), rng.choice(ids)) for _ in range(edges)]
    return GraphModel.build(graph_nodes, graph_edges)
