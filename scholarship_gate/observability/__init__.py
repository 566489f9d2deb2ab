"""Observability: in-memory gateway metrics. No external SaaS."""

from scholarship_gate.observability.metrics import MetricsCollector

__all__ = ["MetricsCollector"]
