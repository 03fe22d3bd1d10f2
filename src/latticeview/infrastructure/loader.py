"""Dataset loading — the boundary where external graph data enters.

Records are validated here with pydantic so the view pipeline never sees
an ill-typed node or edge. Malformed records are skipped with a warning
instead of failing the whole load; only an unreadable file or a payload
that is not a ``{"nodes": [...], "edges": [...]}`` object is an error.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from latticeview.domain.models import GraphEdge, GraphModel, GraphNode
from latticeview.domain.types import parse_tier

logger = logging.getLogger(__name__)


class DatasetError(Exception):
    """Raised when a dataset cannot be read at all."""


@dataclass
class LoadResult:
    """A validated GraphModel plus non-fatal issues found while loading."""

    model: GraphModel
    warnings: list[str] = field(default_factory=list)


def parse_records(
    raw_nodes: Iterable[Any],
    raw_edges: Iterable[Any],
) -> LoadResult:
    """Validate raw node/edge mappings into a GraphModel."""
    warnings: list[str] = []
    nodes: list[GraphNode] = []
    edges: list[GraphEdge] = []

    for i, raw in enumerate(raw_nodes):
        if not isinstance(raw, Mapping):
            warnings.append(f"Skipped node #{i}: not an object")
            continue
        try:
            node = GraphNode.model_validate(dict(raw))
        except ValidationError as exc:
            warnings.append(f"Skipped node #{i}: {_first_error(exc)}")
            continue
        if parse_tier(node.tier) is None:
            warnings.append(f"Node '{node.id}' has unknown tier '{node.tier}'")
        nodes.append(node)

    for i, raw in enumerate(raw_edges):
        if not isinstance(raw, Mapping):
            warnings.append(f"Skipped edge #{i}: not an object")
            continue
        try:
            edges.append(GraphEdge.model_validate(dict(raw)))
        except ValidationError as exc:
            warnings.append(f"Skipped edge #{i}: {_first_error(exc)}")

    for w in warnings:
        logger.debug("dataset: %s", w)
    return LoadResult(model=GraphModel.build(nodes, edges), warnings=warnings)


def parse_payload(payload: Any) -> LoadResult:
    """Validate a decoded JSON payload.

    Accepts ``edges`` or the D3-style ``links`` key for the edge list.
    """
    if not isinstance(payload, Mapping):
        raise DatasetError("Dataset must be a JSON object with 'nodes' and 'edges'")
    raw_nodes = payload.get("nodes", [])
    raw_edges = payload.get("edges", payload.get("links", []))
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise DatasetError("'nodes' and 'edges' must be JSON arrays")
    return parse_records(raw_nodes, raw_edges)


def load_dataset(path: Path) -> LoadResult:
    """Read and validate a JSON dataset from *path*."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DatasetError(f"Cannot read {path}: {exc}") from exc
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DatasetError(f"Invalid JSON in {path}: {exc}") from exc
    return parse_payload(payload)


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ())) or "record"
    return f"{loc}: {err.get('msg', 'invalid')}"
