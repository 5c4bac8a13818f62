"""Tests for the performance analysis parser."""

import json

import pytest

from boostsec.incident_reporter.models.performance import AnalysisRecord
from boostsec.incident_reporter.models.report import TestStatus
from boostsec.incident_reporter.parsers.base import ParseError, RawArtifact
from boostsec.incident_reporter.parsers.perf_report import (
    analysis_to_reports,
    load_perf_document,
)


def _record(
    run: str, transaction: str, metric: str, error: bool = False
) -> AnalysisRecord:
    return AnalysisRecord(
        run=run,
        transaction=transaction,
        metric=metric,
        comparator="gt",
        run_value=600,
        threshold_value=500,
        error=error,
    )


def test_analysis_to_reports_groups_by_run_and_transaction() -> None:
    """Records group into reports per run and suites per transaction."""
    records = [
        _record("run-1", "Login", "meanResTime", error=True),
        _record("run-1", "Login", "pct1ResTime"),
        _record("run-1", "Search", "meanResTime"),
        _record("run-2", "Login", "meanResTime", error=True),
    ]

    reports = analysis_to_reports(records)

    assert [report.name for report in reports] == ["run-1", "run-2"]
    assert [suite.name for suite in reports[0].testsuites] == ["Login", "Search"]
    assert reports[0].tests == 3
    assert reports[0].failures == 1
    assert reports[1].tests == 1
    assert reports[1].failures == 1


def test_analysis_to_reports_failure_message() -> None:
    """A failing metric carries a message reproducing the comparison."""
    record = _record("run-1", "Login", "meanResTime", error=True)
    reports = analysis_to_reports([record])

    test = reports[0].testsuites[0].tests[0]

    assert test.name == "meanResTime"
    assert test.status == TestStatus.FAIL
    assert test.failures[0].text == (
        "ERROR: run: run-1, transaction: Login, metric: meanResTime is failing "
        "threshold => Value: 600 (Operator: gt) Threshold: 500"
    )


def test_analysis_to_reports_passing_metric() -> None:
    """A passing metric has no failure."""
    reports = analysis_to_reports([_record("run-1", "Login", "meanResTime")])

    test = reports[0].testsuites[0].tests[0]

    assert test.status == TestStatus.PASS
    assert test.failures == []


def test_load_perf_document_accepts_saved_report() -> None:
    """The persisted analysis report is accepted."""
    content = {
        "analysis": [
            {
                "run": "run-1",
                "transaction": "Login",
                "metric": "meanResTime",
                "comparator": "gt",
                "runValue": 600,
                "thresholdValue": 500,
                "error": True,
            }
        ],
        "startedAt": "2024-05-01T10:00:00Z",
        "tags": [],
    }
    artifact = RawArtifact(
        filepath="/reports/analysis.json", content=json.dumps(content)
    )

    document = load_perf_document(artifact)

    assert document.started_at == "2024-05-01T10:00:00Z"
    assert document.analysis[0].error is True
    assert document.filepath == "/reports/analysis.json"


def test_load_perf_document_accepts_bare_list() -> None:
    """A bare list of analysis records is accepted."""
    records = [_record("run-1", "Login", "meanResTime").model_dump(by_alias=True)]
    artifact = RawArtifact(
        filepath="/reports/analysis.json", content=json.dumps(records)
    )

    document = load_perf_document(artifact)

    assert len(document.analysis) == 1


def test_load_perf_document_rejects_scalar() -> None:
    """A JSON scalar is not an analysis."""
    artifact = RawArtifact(filepath="/reports/analysis.json", content="42")

    with pytest.raises(ParseError, match="expected an analysis object or list"):
        load_perf_document(artifact)


def test_load_perf_document_rejects_invalid_records() -> None:
    """Records missing required fields raise ParseError."""
    artifact = RawArtifact(
        filepath="/reports/analysis.json", content=json.dumps([{"run": "run-1"}])
    )

    with pytest.raises(ParseError, match="invalid analysis report"):
        load_perf_document(artifact)
