"""Build suites, reports, and runs with totals summed bottom-up."""

import logging
from collections.abc import Sequence

from boostsec.incident_reporter.classifier import (
    count_statuses,
    normalize_failure_count,
)
from boostsec.incident_reporter.models.report import (
    Report,
    Run,
    TestCase,
    TestStatus,
    TestSuite,
)

logger = logging.getLogger(__name__)


def build_suite(
    name: str,
    tests: Sequence[TestCase],
    time: float = 0.0,
    timestamp: str = "",
    declared_failures: int | None = None,
    declared_skipped: int = 0,
) -> TestSuite:
    """Build a suite whose counts are derived from its test statuses.

    Args:
        name: Suite name
        tests: Classified tests of the suite
        time: Suite execution time in seconds
        timestamp: Suite start timestamp
        declared_failures: Failure count announced by the source, if any
        declared_skipped: Skipped count announced by the source

    Returns:
        Suite with failures, skipped, and pending counted from the tests

    """
    counts = count_statuses(tests)
    failures = counts[TestStatus.FAIL]

    if declared_failures is not None:
        declared = normalize_failure_count(declared_failures, declared_skipped)
        if declared != failures:
            logger.debug(
                f"Suite {name} declares {declared} failures, "
                f"{failures} found in its tests"
            )

    return TestSuite(
        name=name,
        failures=failures,
        skipped=counts[TestStatus.SKIP],
        pending=counts[TestStatus.PENDING],
        time=time,
        timestamp=timestamp,
        tests=list(tests),
    )


def build_report(
    name: str, suites: Sequence[TestSuite], timestamp: str | None = None
) -> Report:
    """Build a report summing the totals of its suites."""
    return Report(
        name=name,
        tests=sum(len(s.tests) for s in suites),
        failures=sum(s.failures for s in suites),
        skipped=sum(s.skipped for s in suites),
        pending=sum(s.pending for s in suites),
        time=sum(s.time for s in suites),
        timestamp=timestamp,
        testsuites=list(suites),
    )


def build_run(reports: Sequence[Report]) -> Run:
    """Build a run summing the totals of its reports."""
    return Run(
        tests=sum(r.tests for r in reports),
        failures=sum(r.failures for r in reports),
        skipped=sum(r.skipped for r in reports),
        pending=sum(r.pending for r in reports),
        time=sum(r.time for r in reports),
        reports=list(reports),
    )
