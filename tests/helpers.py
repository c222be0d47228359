from __future__ import annotations

from datetime import UTC, datetime

from metrik.models.enums import Status
from metrik.schemas.execution import Commit, Execution, Stage

MILLIS_PER_HOUR = 60 * 60 * 1000
MILLIS_PER_DAY = 24 * MILLIS_PER_HOUR


def _ms(year: int, month: int, day: int, hour: int = 0) -> int:
    """Return the epoch-millisecond instant for a UTC date and hour."""
    return int(datetime(year, month, day, hour, tzinfo=UTC).timestamp() * 1000)


def _stage(
    name: str = "deploy",
    status: Status = Status.success,
    completed_timestamp: int | None = None,
) -> Stage:
    """Return a :class:`Stage` with sensible defaults."""
    return Stage(name=name, status=status, completed_timestamp=completed_timestamp)


def _deploy(
    completed_timestamp: int | None,
    status: Status = Status.success,
    *,
    pipeline_id: str = "p1",
    stage_name: str = "deploy",
    number: int | None = None,
    timestamp: int | None = None,
    commits: list[tuple[str, int]] | None = None,
) -> Execution:
    """Return an execution with a build stage followed by one deployment stage."""
    return Execution(
        pipeline_id=pipeline_id,
        number=number,
        timestamp=timestamp,
        stages=(
            _stage("build", Status.success, completed_timestamp),
            _stage(stage_name, status, completed_timestamp),
        ),
        change_sets=tuple(Commit(commit_id=cid, timestamp=ts) for cid, ts in commits or []),
    )
