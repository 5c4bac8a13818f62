"""Tests for report discovery."""

from pathlib import Path

import pytest

from boostsec.incident_reporter.report_finder import find_report_files


def test_find_report_files_single_file(tmp_path: Path) -> None:
    """A single report file is returned as is."""
    report = tmp_path / "results.xml"
    report.write_text("<testsuites/>")

    assert find_report_files(report, "xml") == [report]


def test_find_report_files_directory(tmp_path: Path) -> None:
    """A directory is searched recursively for the extension."""
    (tmp_path / "nested").mkdir()
    (tmp_path / "b.xml").write_text("<testsuites/>")
    (tmp_path / "nested" / "a.xml").write_text("<testsuites/>")
    (tmp_path / "notes.txt").write_text("ignored")

    files = find_report_files(tmp_path, "xml")

    assert files == sorted([tmp_path / "b.xml", tmp_path / "nested" / "a.xml"])


def test_find_report_files_empty_directory(tmp_path: Path) -> None:
    """A directory without reports yields no files."""
    assert find_report_files(tmp_path, "json") == []


def test_find_report_files_missing_path(tmp_path: Path) -> None:
    """A missing path raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError, match="Report path not found"):
        find_report_files(tmp_path / "missing", "xml")


def test_find_report_files_wrong_extension(tmp_path: Path) -> None:
    """A single file with another extension raises ValueError."""
    report = tmp_path / "results.json"
    report.write_text("{}")

    with pytest.raises(ValueError, match="is not a .xml file"):
        find_report_files(report, "xml")
