from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping, Sequence

from metrik.calculators.base import MetricsCalculator
from metrik.calculators.registry import CalculatorRegistry, default_registry
from metrik.models.enums import MetricKind
from metrik.schemas.execution import Execution
from metrik.schemas.metrics import MetricResult

logger = logging.getLogger(__name__)


class MetricsCalculationError(RuntimeError):
    """A calculator failed; ``kind`` names the metric and ``__cause__`` holds the original error."""

    def __init__(self, kind: MetricKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class MetricsDispatcher:
    """Routes a calculation request to the registered calculators.

    Every requested calculator receives the same executions, window and
    pipeline-to-stage map.  The dispatcher holds no metric-specific logic.

    Usage::

        dispatcher = MetricsDispatcher()
        results = dispatcher.calculate(
            [MetricKind.deployment_frequency],
            executions,
            start_timestamp,
            end_timestamp,
            {"pipeline-1": "deploy"},
            days=30,
        )
    """

    def __init__(self, registry: CalculatorRegistry | None = None) -> None:
        self._registry = registry if registry is not None else default_registry()

    @property
    def registry(self) -> CalculatorRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def calculate(
        self,
        kinds: Iterable[MetricKind | str],
        executions: Sequence[Execution],
        start_timestamp: int,
        end_timestamp: int,
        pipeline_stages: Mapping[str, str],
        days: int | None,
    ) -> dict[MetricKind, MetricResult]:
        """Compute every metric in *kinds* and return the results keyed by kind.

        Raises:
            ValueError: If a kind does not name a metric.
            MetricsCalculationError: If a kind is not registered or its
                calculator fails.  The first failure aborts the request.
        """
        results: dict[MetricKind, MetricResult] = {}
        for kind in _unique_kinds(kinds):
            results[kind] = self._run_one(
                kind, executions, start_timestamp, end_timestamp, pipeline_stages, days
            )
        return results

    async def calculate_concurrently(
        self,
        kinds: Iterable[MetricKind | str],
        executions: Sequence[Execution],
        start_timestamp: int,
        end_timestamp: int,
        pipeline_stages: Mapping[str, str],
        days: int | None,
    ) -> dict[MetricKind, MetricResult]:
        """Like :meth:`calculate`, running each calculator in a worker thread."""
        unique_kinds = _unique_kinds(kinds)
        outcomes = await asyncio.gather(
            *(
                asyncio.to_thread(
                    self._run_one,
                    kind,
                    executions,
                    start_timestamp,
                    end_timestamp,
                    pipeline_stages,
                    days,
                )
                for kind in unique_kinds
            )
        )
        return dict(zip(unique_kinds, outcomes))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run_one(
        self,
        kind: MetricKind,
        executions: Sequence[Execution],
        start_timestamp: int,
        end_timestamp: int,
        pipeline_stages: Mapping[str, str],
        days: int | None,
    ) -> MetricResult:
        try:
            calculator: MetricsCalculator = self._registry.get(kind)
            value = calculator.compute_value(executions, start_timestamp, end_timestamp, pipeline_stages)
            level = calculator.compute_level(value, days)
        except Exception as exc:
            logger.exception(
                "calculate: %s failed for window [%d, %d] (%d executions)",
                kind,
                start_timestamp,
                end_timestamp,
                len(executions),
            )
            raise MetricsCalculationError(kind, f"{kind.value}: {exc}") from exc
        return MetricResult(value=value, level=level)


def _unique_kinds(kinds: Iterable[MetricKind | str]) -> list[MetricKind]:
    """Coerce *kinds* to :class:`MetricKind`, dropping repeats but keeping order.

    Raises:
        ValueError: If a value does not name a metric kind.
    """
    return list(dict.fromkeys(MetricKind(kind) for kind in kinds))
