"""Render a human-readable summary of a run."""

from boostsec.incident_reporter.models.report import (
    Report,
    Run,
    TestStatus,
    TestSuite,
)


def build_summary(run: Run, source_type: str = "xml") -> str:
    """Summarize run totals, followed by the tree of failing tests.

    Skipped and pending trees are only rendered for Mocha JSON sources, the
    only format carrying a reliable distinction between the two.

    Args:
        run: Run to summarize
        source_type: Source type the run was ingested from

    Returns:
        Multi-line summary text

    """
    summary = (
        f"Total Tests: {run.tests} - Failure: {run.failures} "
        f"(skipped: {run.skipped}, pending: {run.pending}) - "
        f"Executed in {format_seconds(run.time)}s"
    )

    if run.failures > 0:
        summary += "\nFAILURES:"
        summary += _section(run, "failures", "Failure", TestStatus.FAIL)

    if source_type == "json":
        if run.skipped > 0:
            summary += "\nSKIPPED:"
            summary += _section(run, "skipped", "Skipped", TestStatus.SKIP)
        if run.pending > 0:
            summary += "\nPENDING:"
            summary += _section(run, "pending", "Pending", TestStatus.PENDING)

    return summary


def format_seconds(value: float) -> str:
    """Format a duration without a trailing ``.0`` on whole numbers."""
    return str(int(value)) if float(value).is_integer() else str(value)


def _section(run: Run, counter: str, label: str, status: TestStatus) -> str:
    section = ""
    for report in run.reports:
        count = getattr(report, counter)
        if count <= 0:
            continue
        section += (
            f"\n | Suite: {report.name} - Total tests: {report.tests} - "
            f"{label}: {count} - Executed in {format_seconds(report.time)}s"
        )
        section += _suites(report, counter, status)
    return section


def _suites(report: Report, counter: str, status: TestStatus) -> str:
    lines = ""
    for suite in report.testsuites:
        if getattr(suite, counter) <= 0:
            continue
        lines += f"\n |   | - {suite.name}"
        lines += _tests(suite, status)
    return lines


def _tests(suite: TestSuite, status: TestStatus) -> str:
    label = "SKIPPED" if status == TestStatus.SKIP else status.value
    return "".join(
        f"\n |   |    | - {label}: {test.name}"
        for test in suite.tests
        if test.status == status
    )
