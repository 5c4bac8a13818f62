"""Adapt threshold analysis records into the canonical run shape.

Records are grouped by run (one report each), then by transaction (one suite
each); every metric becomes a test failing when its record is in error.
"""

import json
from collections.abc import Sequence

from pydantic import ValidationError

from boostsec.incident_reporter.aggregator import build_report, build_suite
from boostsec.incident_reporter.classifier import classify_analysis_record
from boostsec.incident_reporter.models.documents import PerfAnalysisDocument
from boostsec.incident_reporter.models.performance import AnalysisRecord
from boostsec.incident_reporter.models.report import (
    Failure,
    Report,
    TestCase,
    TestStatus,
)
from boostsec.incident_reporter.parsers.base import ParseError, RawArtifact


def load_perf_document(artifact: RawArtifact) -> PerfAnalysisDocument:
    """Read an analysis artifact, either a saved report or a bare record list.

    Raises:
        ParseError: If the content is not valid JSON or holds invalid records

    """
    try:
        content = json.loads(artifact.content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(artifact.filepath, f"invalid JSON: {e}") from e

    if isinstance(content, list):
        content = {"analysis": content}
    if not isinstance(content, dict):
        raise ParseError(artifact.filepath, "expected an analysis object or list")

    try:
        return PerfAnalysisDocument.model_validate(
            {**content, "kind": "json-perf", "filepath": artifact.filepath}
        )
    except ValidationError as e:
        raise ParseError(artifact.filepath, f"invalid analysis report: {e}") from e


def analysis_to_reports(records: Sequence[AnalysisRecord]) -> list[Report]:
    """Group analysis records into reports (runs) and suites (transactions)."""
    grouped: dict[str, dict[str, list[AnalysisRecord]]] = {}
    for record in records:
        grouped.setdefault(record.run, {}).setdefault(record.transaction, []).append(
            record
        )

    return [
        build_report(
            name=run_name,
            suites=[
                build_suite(
                    name=transaction,
                    tests=[_metric_test(record) for record in transaction_records],
                )
                for transaction, transaction_records in transactions.items()
            ],
        )
        for run_name, transactions in grouped.items()
    ]


def _metric_test(record: AnalysisRecord) -> TestCase:
    status = classify_analysis_record(record)
    failures = (
        [Failure(text=f"ERROR: {record.describe()}")]
        if status == TestStatus.FAIL
        else []
    )
    return TestCase(name=record.metric, status=status, failures=failures)
