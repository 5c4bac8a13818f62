"""Map each runner's outcome vocabulary onto the canonical TestStatus.

Status derivation is an ordered list of ``(predicate, status)`` rules per
source format. Rules are evaluated top to bottom and the first matching
predicate wins; a subject matching no rule is PASS.
"""

from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from boostsec.incident_reporter.models.documents import MochaTest
from boostsec.incident_reporter.models.performance import AnalysisRecord
from boostsec.incident_reporter.models.report import TestCase, TestStatus

T = TypeVar("T")

# Children of a <testcase> that carry output rather than an outcome.
INFORMATIONAL_XML_TAGS = frozenset({"system-out", "system-err", "properties"})


def _has_child(tag: str) -> Callable[[Sequence[str]], bool]:
    def predicate(tags: Sequence[str]) -> bool:
        return tag in tags

    return predicate


def _has_outcome_child(tags: Sequence[str]) -> bool:
    return any(tag not in INFORMATIONAL_XML_TAGS for tag in tags)


XML_STATUS_RULES: tuple[
    tuple[Callable[[Sequence[str]], bool], TestStatus], ...
] = (
    (_has_child("skipped"), TestStatus.SKIP),
    (_has_child("pending"), TestStatus.PENDING),
    (_has_outcome_child, TestStatus.FAIL),
)

MOCHA_STATUS_RULES: tuple[
    tuple[Callable[[MochaTest], bool], TestStatus], ...
] = (
    (lambda test: test.fail, TestStatus.FAIL),
    (lambda test: test.pending, TestStatus.PENDING),
)

ANALYSIS_STATUS_RULES: tuple[
    tuple[Callable[[AnalysisRecord], bool], TestStatus], ...
] = (
    (lambda record: record.error, TestStatus.FAIL),
)


def classify(
    subject: T,
    rules: Iterable[tuple[Callable[[T], bool], TestStatus]],
    default: TestStatus = TestStatus.PASS,
) -> TestStatus:
    """Return the status of the first rule whose predicate matches."""
    for predicate, status in rules:
        if predicate(subject):
            return status
    return default


def classify_xml_testcase(child_tags: Sequence[str]) -> TestStatus:
    """Derive a status from the child element tags of a <testcase>."""
    return classify(child_tags, XML_STATUS_RULES)


def classify_mocha_test(test: MochaTest) -> TestStatus:
    """Derive a status from the flags of a Mocha test."""
    return classify(test, MOCHA_STATUS_RULES)


def classify_analysis_record(record: AnalysisRecord) -> TestStatus:
    """A threshold metric fails when its analysis record is in error."""
    return classify(record, ANALYSIS_STATUS_RULES)


def normalize_failure_count(failures: int, skipped: int) -> int:
    """Correct a declared failure count.

    Some report generators emit a negative failure count alongside skipped
    tests such that ``failures + skipped == 0``; that count means no failures.
    Any other negative count is clamped to 0.
    """
    if skipped > 0 and failures < 0 and failures + skipped == 0:
        return 0
    return max(failures, 0)


def count_statuses(tests: Iterable[TestCase]) -> Counter[TestStatus]:
    """Count tests per status."""
    return Counter(test.status for test in tests)
