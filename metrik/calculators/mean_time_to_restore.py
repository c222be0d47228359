from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping, Sequence

from metrik.calculators.base import BaseCalculator, Deployment, iter_deployments
from metrik.calculators.levels import LevelClassifier
from metrik.models.enums import MetricKind, Status
from metrik.schemas.execution import Execution

MILLIS_PER_HOUR: int = 60 * 60 * 1000


class MeanTimeToRestoreCalculator(BaseCalculator):
    """Average time, in hours, for a pipeline to deploy successfully again after a failure.

    Deployments of each pipeline inside the window are walked in completion
    order.  A streak of one or more failures closed by a success counts as a
    single restoration measured from the first failure of the streak.  A
    streak still open at the end of the window is ignored.
    """

    kind = MetricKind.mean_time_to_restore
    classifier = LevelClassifier.lower_is_better(elite_max=1.0, high_max=24.0, medium_max=168.0)

    def compute_value(
        self,
        executions: Sequence[Execution],
        start_timestamp: int,
        end_timestamp: int,
        pipeline_stages: Mapping[str, str],
    ) -> float:
        by_pipeline: dict[str, list[Deployment]] = defaultdict(list)
        for deployment in iter_deployments(executions, start_timestamp, end_timestamp, pipeline_stages):
            by_pipeline[deployment.pipeline_id].append(deployment)

        restore_times: list[int] = []
        for deployments in by_pipeline.values():
            restore_times.extend(_restore_times(deployments))

        if not restore_times:
            return 0.0
        return sum(restore_times) / len(restore_times) / MILLIS_PER_HOUR


def _restore_times(deployments: list[Deployment]) -> list[int]:
    ordered = sorted(
        deployments,
        key=lambda d: (d.done_time, d.execution.number or 0, d.status is Status.success),
    )
    durations: list[int] = []
    first_failure: int | None = None
    for deployment in ordered:
        if deployment.status is Status.failed:
            if first_failure is None:
                first_failure = deployment.done_time
        elif first_failure is not None:
            durations.append(deployment.done_time - first_failure)
            first_failure = None
    return durations
