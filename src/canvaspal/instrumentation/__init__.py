"""Instrumentation module - metric observers and timing decorators."""

from canvaspal.instrumentation.metrics import (
    CompositeObserver,
    LoggingObserver,
    MetricObserver,
    MetricsRecorder,
    PerformanceReport,
    timed,
)

__all__ = [
    "MetricObserver",
    "MetricsRecorder",
    "LoggingObserver",
    "CompositeObserver",
    "PerformanceReport",
    "timed",
]
