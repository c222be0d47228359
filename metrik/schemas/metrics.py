from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from metrik.models.enums import Level, MetricKind, SamplingInterval

# ---------------------------------------------------------------------------
# Calculation results
# ---------------------------------------------------------------------------


class MetricResult(BaseModel):
    """A computed metric value together with its performance tier."""

    model_config = ConfigDict(frozen=True)

    value: float
    level: Level


class MetricsPeriod(BaseModel):
    """Metric results for one sampling period inside the requested window."""

    start_timestamp: int
    end_timestamp: int
    metrics: dict[MetricKind, MetricResult]


class MetricsReport(BaseModel):
    """Summary over the whole window plus one entry per sampling period."""

    summary: dict[MetricKind, MetricResult]
    details: list[MetricsPeriod] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Query payload
# ---------------------------------------------------------------------------


class MetricsQuery(BaseModel):
    """Everything the service needs besides the executions themselves.

    ``pipeline_stages`` maps a pipeline id to the stage name that counts as
    its deployment.  Both timestamps are inclusive epoch milliseconds.
    """

    pipeline_stages: dict[str, str] = Field(default_factory=dict)
    start_timestamp: int = Field(ge=0)
    end_timestamp: int = Field(ge=0)
    metric_kinds: list[MetricKind] = Field(default_factory=lambda: list(MetricKind))
    interval: SamplingInterval | None = None

    @model_validator(mode="after")
    def _check_window(self) -> MetricsQuery:
        if self.start_timestamp > self.end_timestamp:
            raise ValueError(
                f"start_timestamp ({self.start_timestamp}) must not be after "
                f"end_timestamp ({self.end_timestamp})"
            )
        return self
