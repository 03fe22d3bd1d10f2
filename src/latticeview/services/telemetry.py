"""Timing spans for view operations.

Off by default, so an untraced call costs one ContextVar read. Under
``--verbose`` each ``@traced`` operation opens a root span, pipeline stages
open children with :func:`trace_span`, and the finished tree lands in
``ServiceResult.meta["telemetry"]``. Spans slower than
:data:`SLOW_SPAN_MS` are also logged at warning level.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Generator, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from latticeview.services.result import ServiceResult

log = structlog.get_logger("latticeview.telemetry")

SLOW_SPAN_MS = 1000.0

_enabled: ContextVar[bool] = ContextVar("latticeview_telemetry", default=False)
_active: ContextVar[Span | None] = ContextVar("latticeview_span", default=None)


@dataclass
class Span:
    """One timed stage of a view operation."""

    name: str
    parent: Span | None = None
    children: list[Span] = field(default_factory=list)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None
    annotations: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def end(self) -> None:
        self.finished = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def walk(self) -> Iterator[Span]:
        """This span and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, name: str) -> Span | None:
        return next((s for s in self.walk() if s.name == name), None)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 3)}
        if self.error:
            out["error"] = self.error
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.children:
            out["children"] = [c.to_dict() for c in self.children]
        return out


@contextmanager
def _opened(span: Span) -> Generator[Span]:
    token = _active.set(span)
    try:
        yield span
    except Exception as exc:
        span.error = type(exc).__name__
        raise
    finally:
        span.end()
        _active.reset(token)


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Open a child of the active span; yields None when nothing is traced."""
    parent = _active.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    child = Span(name=name, parent=parent)
    parent.children.append(child)
    with _opened(child) as span:
        yield span


def _log_root(span: Span) -> None:
    fields = {
        "span_name": span.name,
        "duration_ms": round(span.duration_ms, 3),
        "stages": sum(1 for _ in span.walk()) - 1,
        "ok": span.error is None,
    }
    if span.duration_ms > SLOW_SPAN_MS:
        log.warning("span.slow", **fields)
    else:
        log.debug("span.complete", **fields)


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time *func* as a root span and attach the tree to its ServiceResult."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        root = Span(name=func.__qualname__)
        try:
            with _opened(root):
                result = func(*args, **kwargs)
        finally:
            _log_root(root)

        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": root.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def enable_telemetry() -> None:
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def get_current_span() -> Span | None:
    """The innermost open span, or None when telemetry is off."""
    return _active.get() if _enabled.get() else None
