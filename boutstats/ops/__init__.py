"""Operational helpers."""

from boutstats.ops.logging import configure_logging
from boutstats.ops.metrics import InMemoryMetricsRecorder, MetricsRecorder, get_metrics_recorder

__all__ = ["configure_logging", "InMemoryMetricsRecorder", "MetricsRecorder", "get_metrics_recorder"]
