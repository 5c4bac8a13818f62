"""Tests for threshold and run statistics loading."""

import json
from pathlib import Path

import pytest

from boostsec.incident_reporter.parsers.base import ParseError
from boostsec.incident_reporter.threshold_loader import (
    load_perf_execution,
    load_thresholds,
)


def test_load_thresholds_yaml(tmp_path: Path) -> None:
    """load_thresholds parses YAML threshold files."""
    thresholds_file = tmp_path / "thresholds.yaml"
    thresholds_file.write_text(
        """
runs:
  - name: "*"
    transactions:
      - name: "Login"
        meanResTime: 300
specs:
  - metric: meanResTime
    comparator: gt
"""
    )

    spec = load_thresholds(thresholds_file)

    assert spec.runs[0].name == "*"
    assert spec.runs[0].transactions[0].metric_value("meanResTime") == 300
    assert spec.specs[0].metric == "meanResTime"


def test_load_thresholds_json(tmp_path: Path) -> None:
    """load_thresholds also accepts JSON threshold files."""
    thresholds_file = tmp_path / "thresholds.json"
    thresholds_file.write_text(
        json.dumps(
            {
                "runs": [{"name": "run-1", "transactions": []}],
                "specs": [{"metric": "errorPct", "comparator": "gte"}],
            }
        )
    )

    spec = load_thresholds(thresholds_file)

    assert spec.runs[0].name == "run-1"
    assert spec.specs[0].comparator == "gte"


def test_load_thresholds_file_not_found(tmp_path: Path) -> None:
    """load_thresholds raises FileNotFoundError for missing file."""
    with pytest.raises(FileNotFoundError, match="Thresholds file not found"):
        load_thresholds(tmp_path / "missing.yaml")


def test_load_thresholds_invalid_yaml(tmp_path: Path) -> None:
    """load_thresholds raises ValueError for invalid YAML."""
    thresholds_file = tmp_path / "thresholds.yaml"
    thresholds_file.write_text("invalid: yaml: content: [")

    with pytest.raises(ValueError, match="Invalid YAML"):
        load_thresholds(thresholds_file)


def test_load_thresholds_empty_file(tmp_path: Path) -> None:
    """load_thresholds raises ValueError for empty file."""
    thresholds_file = tmp_path / "thresholds.yaml"
    thresholds_file.write_text("")

    with pytest.raises(ValueError, match="Empty thresholds file"):
        load_thresholds(thresholds_file)


def test_load_thresholds_invalid_schema(tmp_path: Path) -> None:
    """load_thresholds raises ValueError for unknown comparators."""
    thresholds_file = tmp_path / "thresholds.yaml"
    thresholds_file.write_text(
        """
runs: []
specs:
  - metric: meanResTime
    comparator: between
"""
    )

    with pytest.raises(ValueError, match="Invalid thresholds schema"):
        load_thresholds(thresholds_file)


def test_load_perf_execution(tmp_path: Path) -> None:
    """load_perf_execution parses run statistics."""
    runs_file = tmp_path / "runs.json"
    runs_file.write_text(
        json.dumps(
            {
                "duration": 120,
                "startedAt": "2024-05-01T10:00:00Z",
                "tags": [],
                "runs": [
                    {
                        "name": "run-1",
                        "statistics": {
                            "Login": {"transaction": "Login", "meanResTime": 250}
                        },
                    }
                ],
            }
        )
    )

    execution = load_perf_execution(runs_file)

    assert execution.started_at == "2024-05-01T10:00:00Z"
    assert execution.runs[0].statistics["Login"].metric_value("meanResTime") == 250


def test_load_perf_execution_file_not_found(tmp_path: Path) -> None:
    """load_perf_execution raises FileNotFoundError for missing file."""
    with pytest.raises(FileNotFoundError, match="Runs file not found"):
        load_perf_execution(tmp_path / "runs.json")


def test_load_perf_execution_invalid_json(tmp_path: Path) -> None:
    """load_perf_execution raises ParseError for invalid JSON."""
    runs_file = tmp_path / "runs.json"
    runs_file.write_text("{")

    with pytest.raises(ParseError, match="invalid JSON"):
        load_perf_execution(runs_file)


def test_load_perf_execution_invalid_schema(tmp_path: Path) -> None:
    """load_perf_execution raises ParseError for invalid run statistics."""
    runs_file = tmp_path / "runs.json"
    runs_file.write_text(json.dumps({"runs": [{"statistics": {}}]}))

    with pytest.raises(ParseError, match="invalid run statistics"):
        load_perf_execution(runs_file)
