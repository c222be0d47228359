from __future__ import annotations

from collections.abc import Mapping, Sequence

from metrik.calculators.base import BaseCalculator, iter_deployments
from metrik.calculators.levels import LevelClassifier
from metrik.models.enums import MetricKind, Status
from metrik.schemas.execution import Execution


class ChangeFailureRateCalculator(BaseCalculator):
    """Share of deployments in the window that failed, as a ratio in ``[0, 1]``.

    A deployment is any execution of a mapped pipeline whose deployment stage
    finished inside the window with a success or failure outcome.  With no
    deployments at all the rate is ``0.0``.
    """

    kind = MetricKind.change_failure_rate
    classifier = LevelClassifier.lower_is_better(elite_max=0.15, high_max=0.30, medium_max=0.45)

    def compute_value(
        self,
        executions: Sequence[Execution],
        start_timestamp: int,
        end_timestamp: int,
        pipeline_stages: Mapping[str, str],
    ) -> float:
        statuses = [
            d.status for d in iter_deployments(executions, start_timestamp, end_timestamp, pipeline_stages)
        ]
        if not statuses:
            return 0.0
        return sum(1 for status in statuses if status is Status.failed) / len(statuses)
