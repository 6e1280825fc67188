"""Performance and value metrics - optional observers around the scoring core.

Nothing here is required for scoring. A :class:`MetricObserver` can be handed
to :class:`~canvaspal.scoring.priority.PriorityScorer` to receive factor values,
and :func:`timed` wraps any callable to report its duration.
"""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class MetricObserver(Protocol):
    """Receives named metric values (factor values or durations in ms)."""

    def on_metric(self, name: str, value: float) -> None: ...


@dataclass
class Metric:
    """A single recorded metric."""

    name: str
    value: float
    recorded_at: float = field(default_factory=time.time)


@dataclass
class PerformanceReport:
    """Aggregate view over recorded metrics."""

    count: int
    total: float
    average: float
    slowest: tuple[str, float]
    fastest: tuple[str, float]

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "total": round(self.total, 3),
            "average": round(self.average, 3),
            "slowest": {"name": self.slowest[0], "value": round(self.slowest[1], 3)},
            "fastest": {"name": self.fastest[0], "value": round(self.fastest[1], 3)},
        }


class MetricsRecorder:
    """Collects metrics in memory and summarizes them on demand."""

    def __init__(self) -> None:
        self._metrics: list[Metric] = []

    def on_metric(self, name: str, value: float) -> None:
        self._metrics.append(Metric(name=name, value=value))

    @property
    def metrics(self) -> list[Metric]:
        return list(self._metrics)

    def values(self, name: str) -> list[float]:
        """All recorded values for ``name``, in recording order."""
        return [m.value for m in self._metrics if m.name == name]

    def clear(self) -> None:
        self._metrics.clear()

    def report(self, prefix: str = "") -> PerformanceReport:
        """Summarize metrics whose name starts with ``prefix``."""
        selected = [m for m in self._metrics if m.name.startswith(prefix)]
        if not selected:
            return PerformanceReport(
                count=0,
                total=0.0,
                average=0.0,
                slowest=("none", 0.0),
                fastest=("none", 0.0),
            )

        total = sum(m.value for m in selected)
        slowest = max(selected, key=lambda m: m.value)
        fastest = min(selected, key=lambda m: m.value)
        return PerformanceReport(
            count=len(selected),
            total=total,
            average=total / len(selected),
            slowest=(slowest.name, slowest.value),
            fastest=(fastest.name, fastest.value),
        )


class LoggingObserver:
    """Forwards every metric to a logger at DEBUG level."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self.log = log or logger

    def on_metric(self, name: str, value: float) -> None:
        self.log.debug("Metric %s: %.4f", name, value)


class CompositeObserver:
    """Fans a metric out to several observers."""

    def __init__(self, *observers: MetricObserver) -> None:
        self.observers = observers

    def on_metric(self, name: str, value: float) -> None:
        for observer in self.observers:
            observer.on_metric(name, value)


def timed(name: str, observer: Optional[MetricObserver]) -> Callable[[F], F]:
    """Decorate a callable so each call reports ``name`` with its duration in ms.

    With no observer the function is returned unchanged.
    """
    def decorator(func: F) -> F:
        if observer is None:
            return func

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                observer.on_metric(name, (time.perf_counter() - start) * 1000.0)

        return wrapper  # type: ignore[return-value]

    return decorator
