"""Load threshold specifications and performance run statistics."""

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from boostsec.incident_reporter.models.performance import PerfExecution, ThresholdSpec
from boostsec.incident_reporter.parsers.base import ParseError


def load_thresholds(thresholds_file: Path) -> ThresholdSpec:
    """Load a threshold specification.

    The file may be written in JSON or YAML.

    Args:
        thresholds_file: Path to the thresholds file

    Returns:
        Parsed threshold specification

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is invalid or doesn't match the schema

    """
    if not thresholds_file.exists():
        raise FileNotFoundError(f"Thresholds file not found: {thresholds_file}")

    try:
        with thresholds_file.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {thresholds_file}: {e}") from e

    if data is None:
        raise ValueError(f"Empty thresholds file: {thresholds_file}")

    try:
        return ThresholdSpec.model_validate(data)
    except ValidationError as e:
        raise ValueError(
            f"Invalid thresholds schema in {thresholds_file}: {e}"
        ) from e


def load_perf_execution(runs_file: Path) -> PerfExecution:
    """Load the run statistics produced by a performance test execution.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ParseError: If the file isn't valid JSON or doesn't match the schema

    """
    if not runs_file.exists():
        raise FileNotFoundError(f"Runs file not found: {runs_file}")

    try:
        data = json.loads(runs_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ParseError(str(runs_file), f"invalid JSON: {e}") from e

    try:
        return PerfExecution.model_validate(data)
    except ValidationError as e:
        raise ParseError(str(runs_file), f"invalid run statistics: {e}") from e
