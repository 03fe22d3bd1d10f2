"""RenderAdapter contract and the layout generation tracker.

The view core never touches rendering state. Each cycle it emits an
immutable :class:`ViewSnapshot`; any drawing technology implements
:class:`RenderAdapter` to turn snapshots into pixels.

Relayout is the only slow operation. Every request carries a generation
number; the :class:`LayoutTracker` keeps only results for the latest
generation, so a superseded layout that finishes late is discarded no
matter when it completes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from latticeview.domain.models import HighlightSet, VisibleSubset
from latticeview.domain.view_state import Viewport
from latticeview.services.layout import LayoutPlan

logger = logging.getLogger(__name__)

type Positions = dict[str, tuple[float, float]]


@dataclass(frozen=True)
class ViewSnapshot:
    """Everything a renderer needs for one frame, as plain data.

    ``hover`` and ``search_ids`` are independent highlight layers: the
    renderer draws both and neither suppresses the other.
    """

    generation: int
    visible: VisibleSubset
    hover: HighlightSet
    search_ids: frozenset[str]
    plan: LayoutPlan
    selected_id: str | None = None
    selection_rendered: bool = False
    labels_visible: bool = True
    controls_visible: bool = True
    viewport: Viewport = field(default_factory=Viewport)
    positions: Positions = field(default_factory=dict)
    layout_pending: bool = False
    stats: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RelayoutRequest:
    """A request to lay out the visible subset with the given plan."""

    generation: int
    visible: VisibleSubset
    plan: LayoutPlan


@dataclass(frozen=True)
class LayoutResult:
    """Outcome of one relayout request; ``error`` is set on failure."""

    generation: int
    positions: Positions = field(default_factory=dict)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


type LayoutSink = Callable[[LayoutResult], None]


@runtime_checkable
class RenderAdapter(Protocol):
    """What a rendering technology must provide."""

    def render(self, snapshot: ViewSnapshot) -> None:
        """Draw *snapshot*. Must not raise for well-formed snapshots."""

    def relayout(self, request: RelayoutRequest, deliver: LayoutSink) -> None:
        """Start laying out *request*; call *deliver* once with the result.

        Adapters may deliver synchronously or later (e.g. from ``poll()``).
        """


class LayoutTracker:
    """Generation counter with last-writer-wins acceptance.

    The tracker keeps the most recent accepted positions; a failed or
    stale result never replaces them.
    """

    def __init__(self) -> None:
        self._generation = 0
        self._applied: int | None = None
        self._positions: Positions = {}
        self._last_error: str | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def positions(self) -> Positions:
        return dict(self._positions)

    @property
    def pending(self) -> bool:
        """Whether the latest generation has not produced a result yet."""
        return self._generation > 0 and self._applied != self._generation

    @property
    def last_error(self) -> str | None:
        return self._last_error

    def next_generation(self) -> int:
        """Invalidate any in-flight request and return the new generation."""
        self._generation += 1
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def accept(self, result: LayoutResult) -> bool:
        """Apply *result* if it belongs to the latest generation.

        Returns True when the positions were applied. Failures mark the
        generation as settled but keep the previous positions.
        """
        if not self.is_current(result.generation):
            logger.debug(
                "Discarded stale layout generation %d (current %d)",
                result.generation,
                self._generation,
            )
            return False
        self._applied = result.generation
        if not result.ok:
            self._last_error = result.error
            return False
        self._positions = dict(result.positions)
        self._last_error = None
        return True
