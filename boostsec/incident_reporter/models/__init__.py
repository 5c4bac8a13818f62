"""Data models for test reports, performance analysis, and incidents."""

from boostsec.incident_reporter.models.incident import (
    Incident,
    IncidentCounts,
    Issue,
    IssueState,
)
from boostsec.incident_reporter.models.performance import (
    AnalysisRecord,
    AnalysisReport,
    MetricConstraint,
    PerfExecution,
    PerfRun,
    RunThreshold,
    RunTransaction,
    ThresholdSpec,
    TransactionThreshold,
)
from boostsec.incident_reporter.models.provider_config import GitHubConfig
from boostsec.incident_reporter.models.report import (
    Failure,
    Report,
    Run,
    TestCase,
    TestStatus,
    TestSuite,
)

__all__ = [
    "AnalysisRecord",
    "AnalysisReport",
    "Failure",
    "GitHubConfig",
    "Incident",
    "IncidentCounts",
    "Issue",
    "IssueState",
    "MetricConstraint",
    "PerfExecution",
    "PerfRun",
    "Report",
    "Run",
    "RunThreshold",
    "RunTransaction",
    "TestCase",
    "TestStatus",
    "TestSuite",
    "ThresholdSpec",
    "TransactionThreshold",
]
