from __future__ import annotations

from metrik.calculators.base import MetricsCalculator
from metrik.calculators.change_failure_rate import ChangeFailureRateCalculator
from metrik.calculators.deployment_frequency import DeploymentFrequencyCalculator
from metrik.calculators.lead_time import LeadTimeForChangeCalculator
from metrik.calculators.mean_time_to_restore import MeanTimeToRestoreCalculator
from metrik.models.enums import MetricKind


class UnknownMetricError(KeyError):
    """Raised when no calculator is registered for a requested metric kind."""


class CalculatorRegistry:
    """Lookup of :class:`MetricsCalculator` instances keyed by :class:`MetricKind`.

    Usage::

        registry = CalculatorRegistry()
        registry.register(DeploymentFrequencyCalculator())
        calculator = registry.get(MetricKind.deployment_frequency)
    """

    def __init__(self) -> None:
        self._calculators: dict[MetricKind, MetricsCalculator] = {}

    def register(self, calculator: MetricsCalculator) -> None:
        """Add *calculator* under its own ``kind``.

        Raises:
            ValueError: If a calculator for the same kind is already registered.
        """
        if calculator.kind in self._calculators:
            raise ValueError(f"A calculator for {calculator.kind.value!r} is already registered")
        self._calculators[calculator.kind] = calculator

    def get(self, kind: MetricKind) -> MetricsCalculator:
        """Return the calculator registered for *kind*.

        Raises:
            UnknownMetricError: If nothing is registered for *kind*.
        """
        try:
            return self._calculators[kind]
        except KeyError:
            raise UnknownMetricError(f"No calculator registered for metric kind: {kind!r}") from None

    def kinds(self) -> list[MetricKind]:
        """Registered kinds, in registration order."""
        return list(self._calculators)

    def __contains__(self, kind: object) -> bool:
        return kind in self._calculators


def default_registry() -> CalculatorRegistry:
    """Return a registry holding the four key delivery metrics."""
    registry = CalculatorRegistry()
    registry.register(DeploymentFrequencyCalculator())
    registry.register(LeadTimeForChangeCalculator())
    registry.register(ChangeFailureRateCalculator())
    registry.register(MeanTimeToRestoreCalculator())
    return registry
