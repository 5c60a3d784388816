"""Logging and metrics for Starmark."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .logging import configure_logging
from .metrics import METRICS

__all__ = ["configure_logging", "METRICS", "set_metrics_enabled", "increment", "histogram", "export_prometheus"]

_enabled = True


def set_metrics_enabled(enabled: bool) -> None:
    global _enabled
    _enabled = enabled


def increment(name: str, value: float = 1.0, labels: Optional[Dict[str, Any]] = None) -> None:
    """Increment a counter metric."""
    if not _enabled or name not in METRICS:
        return
    metric = METRICS[name]
    if labels is not None:
        metric.labels(**labels).inc(value)
    else:
        metric.inc(value)


def histogram(name: str, value: float, labels: Optional[Dict[str, Any]] = None) -> None:
    """Observe a histogram metric."""
    if not _enabled or name not in METRICS:
        return
    metric = METRICS[name]
    if labels is not None:
        metric.labels(**labels).observe(value)
    else:
        metric.observe(value)


def export_prometheus() -> str:
    """Export metrics in Prometheus text format."""
    from prometheus_client import generate_latest

    return generate_latest().decode("utf-8")
