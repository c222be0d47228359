from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from metrik.models.enums import Status

# ---------------------------------------------------------------------------
# Leaf models
# ---------------------------------------------------------------------------


class Stage(BaseModel):
    """One named step inside a pipeline execution.

    ``completed_timestamp`` is an epoch-millisecond instant.  ``None`` means
    the stage has not finished, so it can never fall inside a time window.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    status: Status
    completed_timestamp: int | None = None
    start_timestamp: int | None = None


class Commit(BaseModel):
    """A source change picked up by an execution."""

    model_config = ConfigDict(frozen=True)

    commit_id: str
    timestamp: int


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------


class Execution(BaseModel):
    """A single recorded run of a CI/CD pipeline.

    ``stages`` keeps insertion order, which is execution order and not
    necessarily the order in which stages completed.  ``pipeline_id`` is only
    unique within a project.
    """

    model_config = ConfigDict(frozen=True)

    pipeline_id: str
    number: int | None = None
    timestamp: int | None = None
    url: str | None = None
    stages: tuple[Stage, ...] = ()
    change_sets: tuple[Commit, ...] = ()
