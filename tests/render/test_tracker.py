"""Tests for the layout generation tracker."""

from __future__ import annotations

from latticeview.render.adapter import LayoutResult, LayoutTracker


class TestLayoutTracker:
    def test_initial(self) -> None:
        tracker = LayoutTracker()
        assert tracker.generation == 0
        assert tracker.positions == {}
        assert tracker.pending is False
        assert tracker.last_error is None

    def test_next_generation_is_monotonic(self) -> None:
        tracker = LayoutTracker()
        assert [tracker.next_generation() for _ in range(3)] == [1, 2, 3]
        assert tracker.pending is True

    def test_accept_current(self) -> None:
        tracker = LayoutTracker()
        gen = tracker.next_generation()
        assert tracker.accept(LayoutResult(generation=gen, positions={"a": (1.0, 2.0)}))
        assert tracker.positions == {"a": (1.0, 2.0)}
        assert tracker.pending is False

    def test_stale_discarded_regardless_of_order(self) -> None:
        tracker = LayoutTracker()
        old = tracker.next_generation()
        new = tracker.next_generation()
        assert not tracker.accept(LayoutResult(generation=old, positions={"a": (9.0, 9.0)}))
        assert tracker.pending is True
        assert tracker.accept(LayoutResult(generation=new, positions={"a": (1.0, 1.0)}))
        assert not tracker.accept(LayoutResult(generation=old, positions={"a": (9.0, 9.0)}))
        assert tracker.positions == {"a": (1.0, 1.0)}

    def test_failure_keeps_positions(self) -> None:
        tracker = LayoutTracker()
        first = tracker.next_generation()
        tracker.accept(LayoutResult(generation=first, positions={"a": (0.0, 0.0)}))
        gen = tracker.next_generation()
        assert not tracker.accept(LayoutResult(generation=gen, error="timeout"))
        assert tracker.positions == {"a": (0.0, 0.0)}
        assert tracker.last_error == "timeout"
        assert tracker.pending is False

    def test_positions_are_copies(self) -> None:
        tracker = LayoutTracker()
        first = tracker.next_generation()
        tracker.accept(LayoutResult(generation=first, positions={"a": (0.0, 0.0)}))
        tracker.positions["b"] = (1.0, 1.0)
        assert "b" not in tracker.positions

    def test_result_ok(self) -> None:
        assert LayoutResult(generation=1).ok
        assert not LayoutResult(generation=1, error="x").ok
