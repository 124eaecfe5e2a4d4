"""Tracing for page computations and backend fetches.

Off by default. Once enabled, every ``compute_page`` and backend fetch
produces a PageEvent that is optionally kept in memory, handed to the
registered listeners, logged when slower than the threshold and, when
opentelemetry is installed, exported as a span.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Callable

logger = logging.getLogger("keypager")

DEFAULT_SLOW_FETCH_MS = 100.0


@dataclass(frozen=True)
class PageEvent:
    """Represents a single page computation or backend fetch for tracing."""

    operation: str
    source: str
    selector: str | None = None
    page_size: int = 0
    duration_ms: float = 0.0
    result_count: int | None = None
    drift: bool = False


@dataclass
class _TracingState:
    enabled: bool = False
    slow_fetch_ms: float = DEFAULT_SLOW_FETCH_MS
    capture_events: bool = False
    listeners: list[Callable[[PageEvent], Any]] = field(default_factory=list)
    events: list[PageEvent] = field(default_factory=list)

    def reset(self) -> None:
        self.enabled = False
        self.slow_fetch_ms = DEFAULT_SLOW_FETCH_MS
        self.capture_events = False
        self.listeners.clear()
        self.events.clear()


_state = _TracingState()


def enable_tracing(slow_fetch_ms: float = DEFAULT_SLOW_FETCH_MS, capture_events: bool = False) -> None:
    """Start emitting PageEvents.

    Args:
        slow_fetch_ms: Operations slower than this are logged as warnings
        capture_events: Keep events in memory for get_events()
    """
    _state.enabled = True
    _state.slow_fetch_ms = slow_fetch_ms
    _state.capture_events = capture_events


def disable_tracing() -> None:
    """Stop tracing and forget listeners and captured events."""
    _state.reset()


def get_events() -> list[PageEvent]:
    return list(_state.events)


def clear_events() -> None:
    _state.events.clear()


def add_listener(callback: Callable[[PageEvent], Any]) -> None:
    """Call ``callback`` with every PageEvent while tracing is enabled."""
    _state.listeners.append(callback)


def remove_listener(callback: Callable[[PageEvent], Any]) -> None:
    _state.listeners.remove(callback)


def publish(event: PageEvent) -> None:
    """Hand a finished event to the capture buffer, the log, listeners and OpenTelemetry."""
    if _state.capture_events:
        _state.events.append(event)

    if event.duration_ms > _state.slow_fetch_ms:
        logger.warning(
            "Slow %s on %s took %.1fms (threshold: %.1fms)",
            event.operation,
            event.source,
            event.duration_ms,
            _state.slow_fetch_ms,
        )

    for listener in list(_state.listeners):
        listener(event)

    tracer = _otel_tracer()
    if tracer is not None:
        with tracer.start_as_current_span(f"keypager.{event.operation}") as span:
            for key, value in _span_attributes(event).items():
                span.set_attribute(f"keypager.{key}", value)


@lru_cache(maxsize=1)
def _otel_tracer() -> Any:
    try:
        from opentelemetry import trace
    except ImportError:
        return None
    return trace.get_tracer("keypager")


def _span_attributes(event: PageEvent) -> dict[str, Any]:
    attributes: dict[str, Any] = {
        "source": event.source,
        "page_size": event.page_size,
        "duration_ms": event.duration_ms,
        "drift": event.drift,
    }
    if event.selector is not None:
        attributes["selector"] = event.selector
    if event.result_count is not None:
        attributes["result_count"] = event.result_count
    return attributes


class _Measurement:
    """Times one operation and publishes its PageEvent on exit.

    Usable with ``with`` and ``async with``; both yield a dict in which the
    caller records ``result_count`` and ``drift``.
    """

    def __init__(self, operation: str, source: str, selector: Any, page_size: int) -> None:
        self.operation = operation
        self.source = source
        self.selector = selector
        self.page_size = page_size
        self.ctx: dict[str, Any] = {"result_count": None, "drift": False}
        self._active = False
        self._start = 0.0

    def __enter__(self) -> dict[str, Any]:
        self._active = _state.enabled
        self._start = time.perf_counter()
        return self.ctx

    def __exit__(self, *exc_info: Any) -> None:
        if self._active:
            publish(self._event())

    async def __aenter__(self) -> dict[str, Any]:
        return self.__enter__()

    async def __aexit__(self, *exc_info: Any) -> None:
        self.__exit__(*exc_info)

    def _event(self) -> PageEvent:
        return PageEvent(
            operation=self.operation,
            source=self.source,
            selector=None if self.selector is None else f"{type(self.selector).__name__}({self.selector})",
            page_size=self.page_size,
            duration_ms=(time.perf_counter() - self._start) * 1000,
            result_count=self.ctx["result_count"],
            drift=bool(self.ctx["drift"]),
        )


def track_page(operation: str, source: str, selector: Any = None, page_size: int = 0) -> _Measurement:
    """Time a synchronous page computation: ``with track_page(...) as ctx``."""
    return _Measurement(operation, source, selector, page_size)


def track_fetch(operation: str, source: str, selector: Any = None, page_size: int = 0) -> _Measurement:
    """Time an asynchronous backend fetch: ``async with track_fetch(...) as ctx``."""
    return _Measurement(operation, source, selector, page_size)
