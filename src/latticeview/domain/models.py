"""Graph records and the immutable snapshots derived from them.

``GraphNode`` and ``GraphEdge`` are pydantic models: they are validated
once, where external data enters the system, and are frozen afterwards.
``GraphModel``, ``VisibleSubset`` and ``HighlightSet`` are plain frozen
dataclasses rebuilt wholesale on every change — nothing patches them.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class GraphNode(BaseModel):
    """A single DTU as supplied by the caller.

    ``tier`` is kept as a normalized string rather than a ``Tier`` so that
    unknown classifications survive loading; they simply never match a
    tier filter.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    id: str = Field(min_length=1)
    label: str = ""
    tier: str = "regular"
    tags: frozenset[str] = Field(default_factory=frozenset)
    resonance: float | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")

    @field_validator("tier", mode="before")
    @classmethod
    def _normalize_tier(cls, value: Any) -> str:
        if value is None:
            return "regular"
        return str(value).strip().lower()

    @field_validator("resonance")
    @classmethod
    def _clamp_resonance(cls, value: float | None) -> float | None:
        if value is None:
            return None
        return min(1.0, max(0.0, value))


class GraphEdge(BaseModel):
    """A connection between two node ids (direction is informational)."""

    model_config = {"frozen": True}

    source: str
    target: str
    weight: float = 1.0
    type: str | None = None

    @field_validator("weight", mode="before")
    @classmethod
    def _default_weight(cls, value: Any) -> Any:
        return 1.0 if value is None else value

    @property
    def edge_id(self) -> str:
        return f"{self.source}-{self.target}"

    def touches(self, node_id: str) -> bool:
        return node_id in (self.source, self.target)

    def other_end(self, node_id: str) -> str | None:
        """Return the opposite endpoint, or None if *node_id* is not on this edge."""
        if self.source == node_id:
            return self.target
        if self.target == node_id:
            return self.source
        return None


# ---------------------------------------------------------------------------
# GraphModel: the session's full dataset
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GraphModel:
    """Immutable snapshot of every known node and edge.

    Duplicate node ids collapse onto the last record supplied, keeping
    the position of the first occurrence. Edges are stored as given,
    including ones whose endpoints are unknown — they are dropped later
    by the view filter.
    """

    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()
    _index: dict[str, GraphNode] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index: dict[str, GraphNode] = {}
        for node in self.nodes:
            index[node.id] = node
        object.__setattr__(self, "_index", index)
        object.__setattr__(self, "nodes", tuple(index.values()))
        object.__setattr__(self, "edges", tuple(self.edges))

    @classmethod
    def build(cls, nodes: Iterable[GraphNode], edges: Iterable[GraphEdge]) -> GraphModel:
        return cls(nodes=tuple(nodes), edges=tuple(edges))

    @classmethod
    def empty(cls) -> GraphModel:
        return cls()

    @property
    def node_ids(self) -> frozenset[str]:
        return frozenset(self._index)

    def get(self, node_id: str) -> GraphNode | None:
        return self._index.get(node_id)

    def contains(self, node_id: str) -> bool:
        return node_id in self._index

    def __len__(self) -> int:
        return len(self.nodes)

    def stats(self) -> dict[str, Any]:
        """Counts for the stats overlay: totals plus a per-tier breakdown."""
        tiers = Counter(node.tier for node in self.nodes)
        dangling = sum(
            1 for e in self.edges if e.source not in self._index or e.target not in self._index
        )
        return {
            "nodes": len(self.nodes),
            "edges": len(self.edges),
            "dangling_edges": dangling,
            "tiers": dict(sorted(tiers.items())),
        }


# ---------------------------------------------------------------------------
# Derived views
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VisibleSubset:
    """Nodes that passed the tier filter and the edges between them."""

    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()

    @property
    def node_ids(self) -> frozenset[str]:
        return frozenset(n.id for n in self.nodes)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def get(self, node_id: str) -> GraphNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


@dataclass(frozen=True)
class HighlightSet:
    """Hover-driven focus: the focused neighbourhood and everything dimmed.

    Both sets are empty in the neutral state.
    """

    focused_ids: frozenset[str] = frozenset()
    faded_ids: frozenset[str] = frozenset()
    focus_id: str | None = None

    @property
    def is_neutral(self) -> bool:
        return not self.focused_ids

    def class_for(self, node_id: str) -> str | None:
        """Return ``"highlighted"``, ``"faded"`` or None for a node."""
        if node_id in self.focused_ids:
            return "highlighted"
        if node_id in self.faded_ids:
            return "faded"
        return None


NEUTRAL_HIGHLIGHT = HighlightSet()
