from __future__ import annotations

from enum import Enum


class Status(str, Enum):
    """Terminal or transient state of a pipeline stage as reported by the CI system."""

    success = "SUCCESS"
    failed = "FAILED"
    in_progress = "IN_PROGRESS"
    aborted = "ABORTED"
    other = "OTHER"


class Level(str, Enum):
    """DORA performance tiers, ordered from worst to best."""

    low = "LOW"
    medium = "MEDIUM"
    high = "HIGH"
    elite = "ELITE"

    @property
    def rank(self) -> int:
        """Ordinal position of the tier: ``low`` is 1, ``elite`` is 4."""
        return _LEVEL_RANKS[self]


_LEVEL_RANKS: dict[Level, int] = {
    Level.low: 1,
    Level.medium: 2,
    Level.high: 3,
    Level.elite: 4,
}


class MetricKind(str, Enum):
    """Stable identifiers for the four key delivery metrics."""

    deployment_frequency = "deployment_frequency"
    lead_time_for_change = "lead_time_for_change"
    change_failure_rate = "change_failure_rate"
    mean_time_to_restore = "mean_time_to_restore"


class SamplingInterval(str, Enum):
    """Length of each detail period when a window is split for trend display."""

    fortnightly = "fortnightly"
    monthly = "monthly"
