from __future__ import annotations

from collections.abc import Mapping, Sequence

from metrik.calculators.base import (
    BaseCalculator,
    deployment_done_time,
    deployment_status,
    iter_role_executions,
)
from metrik.calculators.levels import LevelClassifier
from metrik.models.enums import MetricKind, Status
from metrik.schemas.execution import Commit, Execution

MILLIS_PER_DAY: int = 24 * 60 * 60 * 1000


class LeadTimeForChangeCalculator(BaseCalculator):
    """Average time, in days, from commit to the deployment that shipped it.

    Executions of each pipeline are replayed in trigger order.  Commits picked
    up by runs that did not deploy successfully are carried forward to the
    next successful deployment, since that is when they reached production.
    Only deployments finishing inside the window contribute, but the replay
    starts from the pipeline's earliest execution so that carried-over
    commits are attributed correctly.
    """

    kind = MetricKind.lead_time_for_change
    classifier = LevelClassifier.lower_is_better(elite_max=1.0, high_max=7.0, medium_max=30.0)

    def compute_value(
        self,
        executions: Sequence[Execution],
        start_timestamp: int,
        end_timestamp: int,
        pipeline_stages: Mapping[str, str],
    ) -> float:
        lead_times: list[int] = []
        for _, stage_name, pipeline_executions in iter_role_executions(executions, pipeline_stages):
            lead_times.extend(
                _pipeline_lead_times(pipeline_executions, stage_name, start_timestamp, end_timestamp)
            )

        if not lead_times:
            return 0.0
        return sum(lead_times) / len(lead_times) / MILLIS_PER_DAY


def _replay_key(execution: Execution, stage_name: str) -> tuple[int, int, int, bool]:
    done = deployment_done_time(execution, stage_name)
    triggered = execution.timestamp if execution.timestamp is not None else done or 0
    # On a tie the failed run replays first so its commits carry into the success.
    succeeded = deployment_status(execution, stage_name) is Status.success
    return triggered, execution.number or 0, done or 0, succeeded


def _pipeline_lead_times(
    executions: list[Execution],
    stage_name: str,
    start_timestamp: int,
    end_timestamp: int,
) -> list[int]:
    lead_times: list[int] = []
    # Keyed by commit id so a commit re-run by several executions is counted once.
    pending: dict[str, Commit] = {}
    delivered: set[str] = set()

    for execution in sorted(executions, key=lambda e: _replay_key(e, stage_name)):
        for commit in execution.change_sets:
            if commit.commit_id not in delivered:
                pending.setdefault(commit.commit_id, commit)

        done = deployment_done_time(execution, stage_name)
        if done is None or deployment_status(execution, stage_name) is not Status.success:
            continue

        if start_timestamp <= done <= end_timestamp:
            lead_times.extend(max(0, done - commit.timestamp) for commit in pending.values())
        delivered.update(pending)
        pending = {}

    return lead_times
