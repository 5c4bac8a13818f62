"""Parse JUnit-style XML reports."""

import logging
import os
import xml.etree.ElementTree as ET

from boostsec.incident_reporter.aggregator import build_report, build_suite
from boostsec.incident_reporter.classifier import classify_xml_testcase
from boostsec.incident_reporter.models.documents import (
    XmlChildNode,
    XmlContainerNode,
    XmlSuiteDocument,
    XmlSuiteNode,
    XmlTestCaseNode,
)
from boostsec.incident_reporter.models.report import (
    Failure,
    Report,
    TestCase,
    TestSuite,
)
from boostsec.incident_reporter.parsers.base import ParseError, RawArtifact

logger = logging.getLogger(__name__)

SUITE_TAGS = frozenset({"testsuite", "suite"})
FAILURE_TAGS = frozenset({"failure", "error"})


def load_xml_document(artifact: RawArtifact) -> XmlSuiteDocument:
    """Read an XML artifact into its document form.

    Raises:
        ParseError: If the content is not well-formed XML

    """
    try:
        root = ET.fromstring(artifact.content)
    except ET.ParseError as e:
        raise ParseError(artifact.filepath, f"invalid XML: {e}") from e

    return XmlSuiteDocument(
        filepath=artifact.filepath, containers=[_container_node(root)]
    )


def xml_document_to_reports(document: XmlSuiteDocument) -> list[Report]:
    """Map an XML document onto canonical reports, one per kept container."""
    filename = os.path.basename(document.filepath)
    reports: list[Report] = []

    for container in document.containers:
        declared_tests = _parse_count(container.attributes.get("tests"))
        if declared_tests is None or declared_tests <= 0:
            logger.info(
                f"Skipping <{container.tag}> in {document.filepath}: "
                "no tests declared"
            )
            continue

        suites = [
            _build_suite(node, filename)
            for node in container.suites
            if (_parse_count(node.attributes.get("tests")) or 0) > 0
        ]
        reports.append(
            build_report(
                name=_name_or_filename(container.attributes.get("name"), filename),
                suites=suites,
                timestamp=container.attributes.get("timestamp"),
            )
        )

    return reports


def _container_node(root: ET.Element) -> XmlContainerNode:
    if root.tag in SUITE_TAGS:
        suites = [_suite_node(root)]
    else:
        suites = [_suite_node(child) for child in root if child.tag in SUITE_TAGS]
    return XmlContainerNode(tag=root.tag, attributes=dict(root.attrib), suites=suites)


def _suite_node(element: ET.Element) -> XmlSuiteNode:
    return XmlSuiteNode(
        attributes=dict(element.attrib),
        testcases=[
            _testcase_node(child) for child in element if child.tag == "testcase"
        ],
    )


def _testcase_node(element: ET.Element) -> XmlTestCaseNode:
    return XmlTestCaseNode(
        attributes=dict(element.attrib),
        children=[
            XmlChildNode(
                tag=child.tag,
                message=child.get("message", ""),
                text=(child.text or "").strip(),
            )
            for child in element
        ],
    )


def _build_suite(node: XmlSuiteNode, filename: str) -> TestSuite:
    attributes = node.attributes
    return build_suite(
        name=_name_or_filename(attributes.get("name"), filename),
        tests=[_build_test(testcase) for testcase in node.testcases],
        time=_parse_number(attributes.get("time")),
        timestamp=attributes.get("timestamp", ""),
        declared_failures=_parse_count(attributes.get("failures")),
        declared_skipped=_parse_count(attributes.get("skipped")) or 0,
    )


def _build_test(node: XmlTestCaseNode) -> TestCase:
    status = classify_xml_testcase([child.tag for child in node.children])
    failures = [
        Failure(text=_failure_text(child))
        for child in node.children
        if child.tag in FAILURE_TAGS
    ]
    return TestCase(
        name=node.attributes.get("name", ""),
        status=status,
        time=_parse_number(node.attributes.get("time")),
        failures=failures,
    )


def _failure_text(child: XmlChildNode) -> str:
    parts = [part for part in (child.message, child.text) if part]
    return "\n".join(parts) if parts else child.tag


def _name_or_filename(name: str | None, filename: str) -> str:
    # Some generators write the literal string "null" instead of a name.
    if not name or name == "null":
        return filename
    return name


def _parse_number(value: str | None) -> float:
    if value is None:
        return 0.0
    try:
        return float(value.replace(",", ""))
    except ValueError:
        return 0.0


def _parse_count(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return round(float(value))
    except (ValueError, OverflowError):
        return None
