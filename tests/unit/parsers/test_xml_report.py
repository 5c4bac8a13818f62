"""Tests for the JUnit XML parser."""

import pytest

from boostsec.incident_reporter.models.report import Report, TestStatus
from boostsec.incident_reporter.parsers.base import ParseError, RawArtifact
from boostsec.incident_reporter.parsers.xml_report import (
    load_xml_document,
    xml_document_to_reports,
)

TESTSUITES_XML = """
<testsuites name="null" tests="4" failures="1" time="3.5">
  <testsuite name="Login" tests="3" failures="1" skipped="1" time="2.5"
             timestamp="2024-05-01T10:00:00">
    <testcase name="logs in" time="1.0"/>
    <testcase name="rejects bad password" time="1.5">
      <failure message="expected 401">AssertionError: expected 401 got 200</failure>
      <system-out>request log</system-out>
    </testcase>
    <testcase name="sso"><skipped/></testcase>
  </testsuite>
  <testsuite name="Search" tests="1" failures="0" time="1.0">
    <testcase name="finds" time="1.0"><system-out>ok</system-out></testcase>
  </testsuite>
</testsuites>
"""


def _parse(content: str, filepath: str = "/reports/results.xml") -> list[Report]:
    document = load_xml_document(RawArtifact(filepath=filepath, content=content))
    return xml_document_to_reports(document)


def test_parse_testsuites_root() -> None:
    """A <testsuites> root becomes one report with one suite per child."""
    reports = _parse(TESTSUITES_XML)

    assert len(reports) == 1
    report = reports[0]
    assert report.name == "results.xml"
    assert report.tests == 4
    assert report.failures == 1
    assert report.skipped == 1
    assert report.time == 3.5
    assert [suite.name for suite in report.testsuites] == ["Login", "Search"]


def test_parse_test_statuses_and_failures() -> None:
    """Test statuses derive from child elements, failure text is kept."""
    login = _parse(TESTSUITES_XML)[0].testsuites[0]

    assert [test.status for test in login.tests] == [
        TestStatus.PASS,
        TestStatus.FAIL,
        TestStatus.SKIP,
    ]
    assert login.failures == 1
    assert login.skipped == 1
    assert login.timestamp == "2024-05-01T10:00:00"
    failure = login.tests[1].failures[0]
    assert failure.text == "expected 401\nAssertionError: expected 401 got 200"


def test_parse_informational_children_pass() -> None:
    """system-out alone does not make a test fail."""
    search = _parse(TESTSUITES_XML)[0].testsuites[1]

    assert search.tests[0].status == TestStatus.PASS
    assert search.failures == 0


def test_parse_single_testsuite_root() -> None:
    """A <testsuite> root is itself the single suite of the report."""
    content = """
    <testsuite name="Checkout" tests="2" time="0.5">
      <testcase name="pays"/>
      <testcase name="refunds"><pending/></testcase>
    </testsuite>
    """

    reports = _parse(content)

    assert len(reports) == 1
    assert reports[0].name == "Checkout"
    assert len(reports[0].testsuites) == 1
    assert reports[0].testsuites[0].name == "Checkout"
    assert reports[0].pending == 1
    assert reports[0].tests == 2


def test_parse_skips_container_without_tests() -> None:
    """Containers declaring no tests are left out."""
    assert _parse('<testsuites tests="0"><testsuite name="a"/></testsuites>') == []
    assert _parse('<testsuites><testsuite name="a"/></testsuites>') == []


def test_parse_skips_suites_without_tests() -> None:
    """Suites declaring no tests are left out of their report."""
    content = """
    <testsuites tests="1">
      <testsuite name="Empty" tests="0"/>
      <testsuite name="Undeclared"><testcase name="a"/></testsuite>
      <testsuite name="Login" tests="1"><testcase name="logs in"/></testsuite>
    </testsuites>
    """

    report = _parse(content)[0]

    assert [suite.name for suite in report.testsuites] == ["Login"]
    assert report.tests == 1


def test_parse_negative_declared_failures() -> None:
    """A declared failures=-2 with skipped=2 yields no failures."""
    content = """
    <testsuite name="Flaky" tests="2" failures="-2" skipped="2">
      <testcase name="a"><skipped/></testcase>
      <testcase name="b"><skipped/></testcase>
    </testsuite>
    """

    report = _parse(content)[0]

    assert report.failures == 0
    assert report.skipped == 2


def test_parse_null_suite_name_uses_filename() -> None:
    """A suite named "null" is named after the artifact."""
    content = """
    <testsuites tests="1">
      <testsuite name="null" tests="1"><testcase name="a"/></testsuite>
    </testsuites>
    """

    report = _parse(content, filepath="/reports/cypress-1.xml")[0]

    assert report.testsuites[0].name == "cypress-1.xml"


def test_parse_invalid_xml() -> None:
    """Malformed XML raises ParseError carrying the file path."""
    with pytest.raises(ParseError, match="Unable to parse /reports/broken.xml") as e:
        _parse("<testsuites><testsuite>", filepath="/reports/broken.xml")

    assert e.value.filepath == "/reports/broken.xml"
