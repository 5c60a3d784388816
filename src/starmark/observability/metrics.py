"""
Defines Prometheus metrics for extraction and re-anchoring.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Re-importing this module (test suites, reloads) must not raise duplicate
# registration errors, so existing collectors are reused by name.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        # Counters register under their base name and the "_total" suffix
        for key in (name, f"{name}_total"):
            existing = _PROM_REGISTRY._names_to_collectors.get(key)
            if existing is not None:
                return existing  # type: ignore[return-value]

        try:
            return metric_cls(name, documentation, *args, **kwargs)  # type: ignore[call-arg]
        except ValueError:
            return _PROM_REGISTRY._names_to_collectors[name]  # type: ignore[return-value]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)  # type: ignore[assignment]
Histogram = _duplicate_safe_factory(_OrigHistogram)  # type: ignore[assignment]


def _create_metrics() -> Dict[str, Any]:
    return {
        "extractions": Counter(
            "starmark_extractions",
            "Extraction attempts by outcome",
            ["status"],
        ),
        "elements_extracted": Counter(
            "starmark_elements_extracted",
            "Elements emitted by the extractor",
            ["kind"],
        ),
        "reanchor": Counter(
            "starmark_reanchor",
            "Re-anchoring outcomes per anchor",
            ["outcome"],
        ),
        "extraction_duration_seconds": Histogram(
            "starmark_extraction_duration_seconds",
            "Wall time of one extraction including rendering",
            buckets=(0.5, 1, 2.5, 5, 10, 20, 30, 60),
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()
