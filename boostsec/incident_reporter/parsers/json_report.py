"""Parse Mocha (mochawesome) JSON reports."""

import json
import logging
import os
from collections.abc import Iterator

from pydantic import ValidationError

from boostsec.incident_reporter.aggregator import build_report, build_suite
from boostsec.incident_reporter.classifier import classify_mocha_test
from boostsec.incident_reporter.models.documents import (
    MochaReportDocument,
    MochaSuite,
    MochaTest,
)
from boostsec.incident_reporter.models.report import (
    Failure,
    Report,
    TestCase,
    TestSuite,
)
from boostsec.incident_reporter.parsers.base import ParseError, RawArtifact

logger = logging.getLogger(__name__)


def load_mocha_document(artifact: RawArtifact) -> MochaReportDocument | None:
    """Read a JSON artifact into a Mocha document.

    Returns:
        The document, or None if the JSON lacks a stats or results object

    Raises:
        ParseError: If the content is not valid JSON or not a valid Mocha report

    """
    try:
        content = json.loads(artifact.content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(artifact.filepath, f"invalid JSON: {e}") from e

    if (
        not isinstance(content, dict)
        or not isinstance(content.get("stats"), dict)
        or not isinstance(content.get("results"), list)
    ):
        logger.info(f"Skipping {artifact.filepath}: no stats and results objects")
        return None

    try:
        return MochaReportDocument.model_validate(
            {**content, "kind": "json", "filepath": artifact.filepath}
        )
    except ValidationError as e:
        raise ParseError(artifact.filepath, f"invalid Mocha report: {e}") from e


def mocha_document_to_report(document: MochaReportDocument) -> Report:
    """Map a Mocha document onto one canonical report named after its file."""
    suites = [
        _build_suite(suite) for result in document.results for suite in result.suites
    ]
    report = build_report(
        name=os.path.basename(document.filepath),
        suites=suites,
        timestamp=document.stats.start,
    )

    if report.tests != document.stats.tests:
        logger.debug(
            f"{document.filepath} declares {document.stats.tests} tests, "
            f"{report.tests} found in its suites"
        )

    return report


def _walk_tests(suite: MochaSuite) -> Iterator[MochaTest]:
    yield from suite.tests
    for child in suite.suites:
        yield from _walk_tests(child)


def _build_suite(suite: MochaSuite) -> TestSuite:
    return build_suite(
        name=suite.title,
        tests=[_build_test(test) for test in _walk_tests(suite)],
        time=_seconds(suite.duration),
    )


def _build_test(test: MochaTest) -> TestCase:
    text = (test.err.estack or test.err.message) if test.err else None
    return TestCase(
        name=test.title,
        status=classify_mocha_test(test),
        time=_seconds(test.duration),
        failures=[Failure(text=text)] if text else [],
        steps=test.code,
    )


def _seconds(milliseconds: float | None) -> float:
    return (milliseconds or 0.0) / 1000
