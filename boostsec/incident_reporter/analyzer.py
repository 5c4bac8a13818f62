"""Compare performance run statistics against a threshold specification."""

import logging
import operator
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TypeVar

from boostsec.incident_reporter.models.performance import (
    AnalysisRecord,
    AnalysisReport,
    MetricConstraint,
    PerfExecution,
    RunThreshold,
    RunTransaction,
    ThresholdSpec,
    TransactionThreshold,
)

logger = logging.getLogger(__name__)

WILDCARD = "*"

# A comparator names the failing condition: "gt" fails when run > threshold.
COMPARATORS: dict[str, Callable[[float, float], bool]] = {
    "gt": operator.gt,
    "gte": operator.ge,
    "lt": operator.lt,
    "lte": operator.le,
}

ThresholdT = TypeVar("ThresholdT", RunThreshold, TransactionThreshold)


def resolve_threshold(
    name: str, candidates: Sequence[ThresholdT]
) -> ThresholdT | None:
    """Find the threshold applying to a run or transaction name.

    Resolution order, every tier case-insensitive: exact name, then the first
    candidate whose name is contained in ``name``, then the ``"*"`` wildcard.

    Returns:
        The matching threshold, or None if no tier matches

    """
    lowered = name.lower()
    for candidate in candidates:
        if candidate.name.lower() == lowered:
            return candidate

    for candidate in candidates:
        if (
            candidate.name
            and candidate.name != WILDCARD
            and candidate.name.lower() in lowered
        ):
            return candidate

    for candidate in candidates:
        if candidate.name == WILDCARD:
            return candidate

    return None


def analyze(
    execution: PerfExecution, thresholds: ThresholdSpec
) -> list[AnalysisRecord]:
    """Evaluate every run of an execution against the thresholds.

    Runs, transactions, and metrics without a matching threshold or value are
    logged and left out of the result.
    """
    records: list[AnalysisRecord] = []

    for run in execution.runs:
        run_threshold = resolve_threshold(run.name, thresholds.runs)
        if run_threshold is None:
            logger.info(f"Skipping analysis for run: {run.name} - No threshold found")
            continue

        logger.info(f"Analyzing run: {run.name}, using threshold: {run_threshold.name}")
        for statistic in run.statistics.values():
            transaction_threshold = resolve_threshold(
                statistic.transaction, run_threshold.transactions
            )
            if transaction_threshold is None:
                logger.info(
                    f"Skipping analysis for run: {run.name}, "
                    f"transaction: {statistic.transaction} - No threshold found"
                )
                continue

            for constraint in thresholds.specs:
                record = _evaluate(
                    run.name, statistic, transaction_threshold, constraint
                )
                if record is not None:
                    records.append(record)

    return records


def failing_records(records: Sequence[AnalysisRecord]) -> list[AnalysisRecord]:
    """Return the records whose metric failed its threshold."""
    return [record for record in records if record.error]


def save_analysis(
    report_file: Path, execution: PerfExecution, records: Sequence[AnalysisRecord]
) -> None:
    """Write the analysis to disk for later historical comparison."""
    report = AnalysisReport(
        analysis=list(records), started_at=execution.started_at, tags=execution.tags
    )
    logger.info(f"Saving report to: {report_file}")
    report_file.write_text(report.model_dump_json(by_alias=True), encoding="utf-8")


def _evaluate(
    run_name: str,
    statistic: RunTransaction,
    threshold: TransactionThreshold,
    constraint: MetricConstraint,
) -> AnalysisRecord | None:
    context = f"run: {run_name}, transaction: {statistic.transaction}"

    run_value = statistic.metric_value(constraint.metric)
    if run_value is None:
        logger.info(
            f"Skipping analysis for {context} - "
            f"No value for: {constraint.metric} in the transaction"
        )
        return None

    threshold_value = threshold.metric_value(constraint.metric)
    if threshold_value is None:
        logger.info(
            f"Skipping analysis for {context} - "
            f"No threshold found for: {constraint.metric} in the transaction"
        )
        return None

    record = AnalysisRecord(
        run=run_name,
        transaction=statistic.transaction,
        metric=constraint.metric,
        comparator=constraint.comparator,
        run_value=run_value,
        threshold_value=threshold_value,
        error=COMPARATORS[constraint.comparator](run_value, threshold_value),
    )

    if record.error:
        logger.info(f"ERROR: {record.describe()}")
    else:
        logger.debug(f"OK: {record.describe()}")

    return record
