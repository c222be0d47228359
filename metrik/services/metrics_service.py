from __future__ import annotations

import logging
from collections.abc import Sequence

from metrik.calculators.dispatcher import MetricsDispatcher
from metrik.config import settings
from metrik.models.enums import SamplingInterval
from metrik.schemas.execution import Execution
from metrik.schemas.metrics import MetricsPeriod, MetricsQuery, MetricsReport
from metrik.services.time_range import split_time_range, window_days

logger = logging.getLogger(__name__)


class MetricsService:
    """Builds a :class:`MetricsReport` for a project's executions.

    The report holds one summary over the whole query window and one entry
    per sampling period, each classified against its own length in days.

    Example::

        service = MetricsService()
        report = service.compute(executions, MetricsQuery(
            pipeline_stages={"pipeline-1": "deploy"},
            start_timestamp=start,
            end_timestamp=end,
        ))
    """

    def __init__(
        self,
        dispatcher: MetricsDispatcher | None = None,
        *,
        default_interval: SamplingInterval | None = None,
        max_periods: int | None = None,
    ) -> None:
        self._dispatcher = dispatcher if dispatcher is not None else MetricsDispatcher()
        self._default_interval = default_interval or settings.DEFAULT_SAMPLING_INTERVAL
        self._max_periods = max_periods if max_periods is not None else settings.MAX_DETAIL_PERIODS

    def compute(self, executions: Sequence[Execution], query: MetricsQuery) -> MetricsReport:
        """Compute the summary and per-period metrics for *query*.

        Raises:
            ValueError: If the window splits into more periods than allowed.
            MetricsCalculationError: If any calculator fails.
        """
        periods = self._periods(query)
        summary = self._dispatcher.calculate(
            query.metric_kinds,
            executions,
            query.start_timestamp,
            query.end_timestamp,
            query.pipeline_stages,
            window_days(query.start_timestamp, query.end_timestamp),
        )
        details = [
            MetricsPeriod(
                start_timestamp=start,
                end_timestamp=end,
                metrics=self._dispatcher.calculate(
                    query.metric_kinds,
                    executions,
                    start,
                    end,
                    query.pipeline_stages,
                    window_days(start, end),
                ),
            )
            for start, end in periods
        ]
        self._log_report(executions, query, len(details))
        return MetricsReport(summary=summary, details=details)

    async def compute_async(self, executions: Sequence[Execution], query: MetricsQuery) -> MetricsReport:
        """Same as :meth:`compute`, running the calculators of each period concurrently."""
        periods = self._periods(query)
        summary = await self._dispatcher.calculate_concurrently(
            query.metric_kinds,
            executions,
            query.start_timestamp,
            query.end_timestamp,
            query.pipeline_stages,
            window_days(query.start_timestamp, query.end_timestamp),
        )
        details: list[MetricsPeriod] = []
        for start, end in periods:
            metrics = await self._dispatcher.calculate_concurrently(
                query.metric_kinds,
                executions,
                start,
                end,
                query.pipeline_stages,
                window_days(start, end),
            )
            details.append(MetricsPeriod(start_timestamp=start, end_timestamp=end, metrics=metrics))
        self._log_report(executions, query, len(details))
        return MetricsReport(summary=summary, details=details)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _periods(self, query: MetricsQuery) -> list[tuple[int, int]]:
        interval = query.interval or self._default_interval
        periods = split_time_range(query.start_timestamp, query.end_timestamp, interval)
        if len(periods) > self._max_periods:
            raise ValueError(
                f"Window [{query.start_timestamp}, {query.end_timestamp}] splits into "
                f"{len(periods)} {interval.value} periods; at most {self._max_periods} are allowed"
            )
        return periods

    @staticmethod
    def _log_report(executions: Sequence[Execution], query: MetricsQuery, period_count: int) -> None:
        logger.info(
            "compute: %d metrics over %d executions, %d pipelines, %d periods",
            len(query.metric_kinds),
            len(executions),
            len(query.pipeline_stages),
            period_count,
        )
