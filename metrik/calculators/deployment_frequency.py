from __future__ import annotations

from collections.abc import Mapping, Sequence

from metrik.calculators.base import (
    BaseCalculator,
    find_stage,
    has_successful_stage,
    iter_role_executions,
    stage_done_within,
)
from metrik.calculators.levels import LevelClassifier
from metrik.models.enums import MetricKind
from metrik.schemas.execution import Execution

ONE_WEEK: int = 7
ONE_MONTH: int = 30


class DeploymentFrequencyCalculator(BaseCalculator):
    """Counts successful deployments and grades them by deployments per day.

    Levels, with each upper bound inclusive:

    * ``LOW``   : at most one deployment per month
    * ``MEDIUM``: at most one per week
    * ``HIGH``  : at most one per day
    * ``ELITE`` : more than one per day
    """

    kind = MetricKind.deployment_frequency
    classifier = LevelClassifier.higher_is_better(
        low_max=1.0 / ONE_MONTH,
        medium_max=1.0 / ONE_WEEK,
        high_max=1.0,
    )

    def compute_value(
        self,
        executions: Sequence[Execution],
        start_timestamp: int,
        end_timestamp: int,
        pipeline_stages: Mapping[str, str],
    ) -> int:
        """Return the number of valid deployments across all mapped pipelines."""
        return sum(
            sum(
                1
                for execution in pipeline_executions
                if self._is_valid_deployment(execution, start_timestamp, end_timestamp, stage_name)
            )
            for _, stage_name, pipeline_executions in iter_role_executions(executions, pipeline_stages)
        )

    def rate(self, value: float, days: int) -> float:
        """Deployments per day."""
        return float(value) / days

    @staticmethod
    def _is_valid_deployment(
        execution: Execution,
        start_timestamp: int,
        end_timestamp: int,
        stage_name: str,
    ) -> bool:
        # The timestamp comes from the first stage with this name while the
        # success check looks at every stage with this name, so a re-run
        # stage can lend its status to an earlier attempt's timestamp.
        return stage_done_within(
            find_stage(execution, stage_name), start_timestamp, end_timestamp
        ) and has_successful_stage(execution, stage_name)
