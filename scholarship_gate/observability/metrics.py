"""Prometheus-style metrics collector for gateway decisions. Thread-safe, in-memory."""

import threading
from typing import Any


class MetricsCollector:
    """
    In-memory Prometheus-style registry. Tracks counters and histograms.
    Thread-safe. Exposes increment, observe_latency, export_metrics.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, float] = {}
        # name -> {"name:label=value" -> count}
        self._counters_by_labels: dict[str, dict[str, float]] = {}
        self._histograms: dict[str, list[float]] = {}

    def increment(
        self,
        name: str,
        value: float = 1.0,
        *,
        outcome: str | None = None,
        resource: str | None = None,
    ) -> None:
        """Increment a counter. Optional outcome or resource label for dimensional metrics."""
        with self._lock:
            labels = []
            if outcome is not None:
                labels.append(f"outcome={outcome}")
            if resource is not None:
                labels.append(f"resource={resource}")
            if not labels:
                self._counters[name] = self._counters.get(name, 0) + value
                return
            key = f"{name}:{','.join(labels)}"
            bucket = self._counters_by_labels.setdefault(name, {})
            bucket[key] = bucket.get(key, 0) + value

    def observe_latency(
        self,
        name: str,
        latency_ms: float,
        *,
        resource: str | None = None,
    ) -> None:
        """Record a latency observation (histogram-style). Optional resource label."""
        with self._lock:
            bucket = name if resource is None else f"{name}:resource={resource}"
            self._histograms.setdefault(bucket, []).append(latency_ms)

    def export_metrics(self) -> dict[str, Any]:
        """Export all metrics as a dict (simulated Prometheus-style)."""
        with self._lock:
            return {
                "counters": dict(self._counters),
                "counters_by_labels": {
                    k: dict(v) for k, v in self._counters_by_labels.items()
                },
                "histograms": {
                    k: {
                        "count": len(v),
                        "sum": sum(v),
                        "values": list(v),
                    }
                    for k, v in self._histograms.items()
                },
            }

    def reset(self) -> None:
        """Reset all metrics (for tests)."""
        with self._lock:
            self._counters.clear()
            self._counters_by_labels.clear()
            self._histograms.clear()
