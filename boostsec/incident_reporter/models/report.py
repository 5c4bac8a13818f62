"""Canonical models for ingested test reports."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TestStatus(str, Enum):
    """Canonical test outcome, shared by every source format."""

    __test__ = False

    PASS = "PASS"
    FAIL = "FAIL"
    SKIP = "SKIP"
    PENDING = "PENDING"


class Failure(BaseModel):
    """One free-text failure message attached to a test."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Failure message or stack trace")


class TestCase(BaseModel):
    """Individual test outcome."""

    __test__ = False

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Test name")
    status: TestStatus = Field(..., description="Derived test status")
    time: float = Field(default=0.0, description="Execution time in seconds")
    failures: list[Failure] = Field(
        default_factory=list, description="Failure messages, if any"
    )
    steps: str | None = Field(default=None, description="Test source or steps")


class TestSuite(BaseModel):
    """Group of tests; counts always match the statuses of its tests."""

    __test__ = False

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Suite name")
    failures: int = Field(default=0, description="Number of failing tests")
    skipped: int = Field(default=0, description="Number of skipped tests")
    pending: int = Field(default=0, description="Number of pending tests")
    time: float = Field(default=0.0, description="Execution time in seconds")
    timestamp: str = Field(default="", description="Suite start timestamp")
    tests: list[TestCase] = Field(default_factory=list, description="Suite tests")


class Report(BaseModel):
    """Normalized content of one source artifact."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Report name")
    tests: int = Field(default=0, description="Number of tests")
    failures: int = Field(default=0, description="Number of failing tests")
    skipped: int = Field(default=0, description="Number of skipped tests")
    pending: int = Field(default=0, description="Number of pending tests")
    time: float = Field(default=0.0, description="Execution time in seconds")
    timestamp: str | None = Field(default=None, description="Report timestamp")
    testsuites: list[TestSuite] = Field(
        default_factory=list, description="Suites contained in the report"
    )


class Run(BaseModel):
    """All reports ingested during one invocation."""

    model_config = ConfigDict(frozen=True)

    tests: int = Field(default=0, description="Number of tests")
    failures: int = Field(default=0, description="Number of failing tests")
    skipped: int = Field(default=0, description="Number of skipped tests")
    pending: int = Field(default=0, description="Number of pending tests")
    time: float = Field(default=0.0, description="Execution time in seconds")
    reports: list[Report] = Field(default_factory=list, description="Reports")
