from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import ClassVar, Protocol

from metrik.calculators.levels import LevelClassifier
from metrik.models.enums import Level, MetricKind, Status
from metrik.schemas.execution import Execution, Stage

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class InvalidWindowError(ValueError):
    """Raised when a level is requested for a missing or non-positive day count."""


# ---------------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------------


class MetricsCalculator(Protocol):
    """Structural protocol that every metric calculator must satisfy."""

    kind: MetricKind
    classifier: LevelClassifier

    def compute_value(
        self,
        executions: Sequence[Execution],
        start_timestamp: int,
        end_timestamp: int,
        pipeline_stages: Mapping[str, str],
    ) -> float:
        """Aggregate *executions* inside the inclusive window into one number."""
        ...

    def compute_level(self, value: float, days: int | None) -> Level:
        """Classify *value*, measured over a window of *days* days."""
        ...


class BaseCalculator:
    """Shared ``compute_level`` implementation for all calculators.

    Subclasses define ``kind`` and ``classifier`` at class level and implement
    ``compute_value``.  Metrics whose thresholds are expressed per day
    override :meth:`rate`; the default passes the value through unchanged.

    Calculators keep no per-call state, so a single instance may serve
    concurrent requests.
    """

    kind: ClassVar[MetricKind]
    classifier: ClassVar[LevelClassifier]

    def compute_level(self, value: float, days: int | None) -> Level:
        """Return the :class:`Level` for *value* over a window of *days* days.

        Raises:
            InvalidWindowError: If *days* is ``None``, not an integer, or not positive.
        """
        if days is None:
            raise InvalidWindowError(f"{self.kind.value}: window length in days is required")
        if isinstance(days, bool) or not isinstance(days, int):
            raise InvalidWindowError(
                f"{self.kind.value}: window length must be a whole number of days, got {days!r}"
            )
        if days <= 0:
            raise InvalidWindowError(f"{self.kind.value}: window length must be positive, got {days}")
        return self.classifier.classify(self.rate(value, days))

    def rate(self, value: float, days: int) -> float:
        """Convert *value* into the quantity the classifier thresholds."""
        return float(value)


# ---------------------------------------------------------------------------
# Stage helpers
# ---------------------------------------------------------------------------


def find_stage(execution: Execution, name: str) -> Stage | None:
    """Return the first stage of *execution* called exactly *name*."""
    return next((s for s in execution.stages if s.name == name), None)


def stage_done_within(stage: Stage | None, start_timestamp: int, end_timestamp: int) -> bool:
    """``True`` when *stage* finished inside the inclusive window."""
    if stage is None or stage.completed_timestamp is None:
        return False
    return start_timestamp <= stage.completed_timestamp <= end_timestamp


def has_successful_stage(execution: Execution, name: str) -> bool:
    """``True`` when any stage called *name* in *execution* succeeded."""
    return any(s.name == name and s.status is Status.success for s in execution.stages)


def deployment_status(execution: Execution, name: str) -> Status | None:
    """Collapse every stage called *name* into one deployment outcome.

    Returns ``Status.success`` if any of them succeeded, otherwise
    ``Status.failed`` if any of them failed, otherwise ``None`` (the
    deployment is still running, was aborted, or never happened).
    """
    if has_successful_stage(execution, name):
        return Status.success
    if any(s.name == name and s.status is Status.failed for s in execution.stages):
        return Status.failed
    return None


def deployment_done_time(execution: Execution, name: str) -> int | None:
    """Completion time of the first stage called *name*, if it finished."""
    stage = find_stage(execution, name)
    return stage.completed_timestamp if stage is not None else None


def iter_role_executions(
    executions: Sequence[Execution],
    pipeline_stages: Mapping[str, str],
) -> Iterator[tuple[str, str, list[Execution]]]:
    """Yield ``(pipeline_id, stage_name, executions)`` for every mapped pipeline.

    Pipelines without executions yield an empty list; executions of pipelines
    missing from *pipeline_stages* are never yielded.
    """
    by_pipeline: dict[str, list[Execution]] = defaultdict(list)
    for execution in executions:
        by_pipeline[execution.pipeline_id].append(execution)

    for pipeline_id, stage_name in pipeline_stages.items():
        yield pipeline_id, stage_name, by_pipeline.get(pipeline_id, [])


# ---------------------------------------------------------------------------
# Deployment view
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Deployment:
    """An execution whose deployment stage reached a success or failure outcome."""

    pipeline_id: str
    execution: Execution
    done_time: int
    status: Status


def iter_deployments(
    executions: Sequence[Execution],
    start_timestamp: int,
    end_timestamp: int,
    pipeline_stages: Mapping[str, str],
) -> Iterator[Deployment]:
    """Yield every deployment whose first deployment stage finished inside the window."""
    for pipeline_id, stage_name, pipeline_executions in iter_role_executions(executions, pipeline_stages):
        for execution in pipeline_executions:
            done = deployment_done_time(execution, stage_name)
            if done is None or not start_timestamp <= done <= end_timestamp:
                continue
            status = deployment_status(execution, stage_name)
            if status is None:
                continue
            yield Deployment(pipeline_id=pipeline_id, execution=execution, done_time=done, status=status)
