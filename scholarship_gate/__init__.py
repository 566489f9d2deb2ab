"""Scholarship database write gate: weekday/holiday restriction and audit trail."""

__version__ = "0.1.0"
