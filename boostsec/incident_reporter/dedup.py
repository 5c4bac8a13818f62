"""Deterministic dedup keys correlating the same failure across CI runs."""

import json
import uuid
from collections.abc import Iterable

from boostsec.incident_reporter.models.report import Run, TestStatus

DEDUP_NAMESPACE = uuid.UUID("92ca6951-5785-4d62-9f33-3512aaa91a9b")


def collect_identities(run: Run, failed_only: bool = True) -> list[str]:
    """List the ``report-suite-test-status`` identity of tests in a run.

    Args:
        run: Run to collect identities from
        failed_only: Only include failing tests

    Returns:
        Identities in discovery order

    """
    return [
        f"{report.name}-{suite.name}-{test.name}-{test.status.value}"
        for report in run.reports
        for suite in report.testsuites
        for test in suite.tests
        if not failed_only or test.status == TestStatus.FAIL
    ]


def dedup_key_from_identities(service: str, identities: Iterable[str]) -> str:
    """Hash a service name and a set of test identities into a dedup key.

    The identities are sorted first, so discovery order never changes the key.
    """
    serialized = json.dumps(
        sorted(identities), separators=(",", ":"), ensure_ascii=False
    )
    return str(uuid.uuid5(DEDUP_NAMESPACE, f"{service}-{serialized}"))


def dedup_key_from_run(service: str, run: Run) -> str:
    """Dedup key of the failing tests of a run."""
    return dedup_key_from_identities(service, collect_identities(run))


def dedup_key_from_message(service: str, message: str) -> str:
    """Dedup key of an incident raised from a free-text message."""
    return str(uuid.uuid5(DEDUP_NAMESPACE, f"{service} - {message}"))
