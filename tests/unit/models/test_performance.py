"""Tests for performance models."""

import json

from boostsec.incident_reporter.models.performance import (
    AnalysisRecord,
    AnalysisReport,
    PerfExecution,
    PerfRun,
    ThresholdSpec,
    TransactionThreshold,
)


def test_transaction_threshold_metric_value() -> None:
    """TransactionThreshold exposes metrics given as extra fields."""
    threshold = TransactionThreshold.model_validate(
        {"name": "Login", "meanResTime": 300, "pct1ResTime": 450.5}
    )

    assert threshold.metric_value("meanResTime") == 300
    assert threshold.metric_value("pct1ResTime") == 450.5
    assert threshold.metric_value("errorPct") is None


def test_transaction_threshold_ignores_non_numeric_values() -> None:
    """Non-numeric metric values are treated as missing."""
    threshold = TransactionThreshold.model_validate(
        {"name": "Login", "meanResTime": "fast", "enabled": True}
    )

    assert threshold.metric_value("meanResTime") is None
    assert threshold.metric_value("enabled") is None


def test_threshold_spec_parsing() -> None:
    """ThresholdSpec parses runs, transactions, and constraints."""
    spec = ThresholdSpec.model_validate(
        {
            "runs": [
                {"name": "*", "transactions": [{"name": "*", "meanResTime": 500}]}
            ],
            "specs": [{"metric": "meanResTime", "comparator": "gt"}],
        }
    )

    assert spec.runs[0].transactions[0].metric_value("meanResTime") == 500
    assert spec.specs[0].comparator == "gt"


def test_perf_run_unwraps_nested_statistics() -> None:
    """Statistics nested one level deeper are unwrapped."""
    run = PerfRun.model_validate(
        {
            "name": "run-1",
            "statistics": {
                "Login": {"Login": {"transaction": "Login", "meanResTime": 120}},
                "Search": {"transaction": "Search", "meanResTime": 80},
            },
        }
    )

    assert run.statistics["Login"].transaction == "Login"
    assert run.statistics["Login"].metric_value("meanResTime") == 120
    assert run.statistics["Search"].metric_value("meanResTime") == 80


def test_perf_execution_accepts_camel_case() -> None:
    """PerfExecution reads startedAt from the run statistics file."""
    execution = PerfExecution.model_validate(
        {
            "duration": 60,
            "startedAt": "2024-05-01T10:00:00Z",
            "tags": [{"name": "jahia", "value": "8.2"}],
            "runs": [],
        }
    )

    assert execution.started_at == "2024-05-01T10:00:00Z"
    assert execution.tags == [{"name": "jahia", "value": "8.2"}]


def test_analysis_record_describe() -> None:
    """describe reproduces the comparator and both values."""
    record = AnalysisRecord(
        run="run-1",
        transaction="Login",
        metric="meanResTime",
        comparator="gt",
        run_value=600,
        threshold_value=500,
        error=True,
    )

    assert record.describe() == (
        "run: run-1, transaction: Login, metric: meanResTime is failing "
        "threshold => Value: 600 (Operator: gt) Threshold: 500"
    )


def test_analysis_report_serializes_camel_case() -> None:
    """AnalysisReport is written with the camelCase keys it is read back with."""
    record = AnalysisRecord(
        run="run-1",
        transaction="Login",
        metric="meanResTime",
        comparator="gt",
        run_value=100,
        threshold_value=500,
    )
    report = AnalysisReport(analysis=[record], started_at="2024-05-01T10:00:00Z")

    data = json.loads(report.model_dump_json(by_alias=True))

    assert data["startedAt"] == "2024-05-01T10:00:00Z"
    assert data["analysis"][0]["runValue"] == 100
    assert data["analysis"][0]["thresholdValue"] == 500
    assert data["analysis"][0]["error"] is False
    assert AnalysisReport.model_validate(data) == report
