from __future__ import annotations

# Enums carry no third-party dependencies and are safe to re-export eagerly.
from metrik.models.enums import Level, MetricKind, SamplingInterval, Status

__all__ = [
    "Level",
    "MetricKind",
    "SamplingInterval",
    "Status",
]
