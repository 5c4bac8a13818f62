"""Models for performance run statistics, thresholds, and analysis records."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Comparator = Literal["gt", "gte", "lt", "lte"]


def _numeric(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return value


class MetricConstraint(BaseModel):
    """Metric to evaluate and the comparator describing a failing value."""

    metric: str = Field(..., description="Metric name (e.g. meanResTime)")
    comparator: Comparator = Field(..., description="Failing comparison")


class TransactionThreshold(BaseModel):
    """Threshold values for one transaction, metrics given as extra fields."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Transaction name, pattern, or '*'")

    def metric_value(self, metric: str) -> float | None:
        """Return the numeric threshold for a metric, if defined."""
        return _numeric((self.model_extra or {}).get(metric))


class RunThreshold(BaseModel):
    """Thresholds applying to runs matching a name."""

    name: str = Field(..., description="Run name, pattern, or '*'")
    transactions: list[TransactionThreshold] = Field(
        default_factory=list, description="Per-transaction thresholds"
    )


class ThresholdSpec(BaseModel):
    """Complete threshold file."""

    runs: list[RunThreshold] = Field(default_factory=list)
    specs: list[MetricConstraint] = Field(default_factory=list)


class RunTransaction(BaseModel):
    """Statistics recorded for one transaction, metrics given as extra fields."""

    model_config = ConfigDict(extra="allow")

    transaction: str = Field(..., description="Transaction name")

    def metric_value(self, metric: str) -> float | None:
        """Return the numeric statistic for a metric, if recorded."""
        return _numeric((self.model_extra or {}).get(metric))


class PerfRun(BaseModel):
    """Statistics of one performance run."""

    name: str = Field(..., description="Run name")
    duration: float = Field(default=0.0, description="Run duration")
    statistics: dict[str, RunTransaction] = Field(default_factory=dict)

    @field_validator("statistics", mode="before")
    @classmethod
    def _unwrap_nested_statistics(cls, value: object) -> object:
        # Newer runs nest each transaction one level deeper.
        if not isinstance(value, dict):
            return value
        unwrapped = {}
        for key, stat in value.items():
            if isinstance(stat, dict) and "transaction" not in stat and stat:
                stat = next(iter(stat.values()))
            unwrapped[key] = stat
        return unwrapped


class PerfExecution(BaseModel):
    """Run statistics file produced by the performance test container."""

    model_config = ConfigDict(populate_by_name=True)

    duration: float = Field(default=0.0)
    started_at: str | None = Field(default=None, alias="startedAt")
    tags: list[dict[str, object]] = Field(default_factory=list)
    runs: list[PerfRun] = Field(default_factory=list)


class AnalysisRecord(BaseModel):
    """Outcome of one metric comparison."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    run: str = Field(..., description="Run name")
    transaction: str = Field(..., description="Transaction name")
    metric: str = Field(..., description="Metric name")
    comparator: str = Field(..., description="Comparator applied")
    run_value: int | float | str = Field(..., alias="runValue")
    threshold_value: int | float | str | None = Field(
        default=None, alias="thresholdValue"
    )
    error: bool = Field(default=False, description="True if the metric failed")

    def describe(self) -> str:
        """Render the comparison, reproducing the values and comparator."""
        outcome = "failing" if self.error else "passing"
        return (
            f"run: {self.run}, transaction: {self.transaction}, "
            f"metric: {self.metric} is {outcome} threshold => "
            f"Value: {self.run_value} (Operator: {self.comparator}) "
            f"Threshold: {self.threshold_value}"
        )


class AnalysisReport(BaseModel):
    """Persisted form of an analysis, kept for historical comparison."""

    model_config = ConfigDict(populate_by_name=True)

    analysis: list[AnalysisRecord] = Field(default_factory=list)
    started_at: str | None = Field(default=None, alias="startedAt")
    tags: list[dict[str, object]] = Field(default_factory=list)
