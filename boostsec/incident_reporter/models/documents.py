"""Validated source documents, one variant per supported report format.

Each variant keeps the source's own vocabulary (raw XML attributes, Mocha
flags, analysis records). Mapping into the canonical report model happens in
the matching parser module.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from boostsec.incident_reporter.models.performance import AnalysisRecord


class XmlChildNode(BaseModel):
    """Child element of a <testcase> (failure, skipped, system-out, ...)."""

    tag: str = Field(..., description="Element tag")
    message: str = Field(default="", description="message attribute")
    text: str = Field(default="", description="Element text content")


class XmlTestCaseNode(BaseModel):
    """A <testcase> element."""

    attributes: dict[str, str] = Field(default_factory=dict)
    children: list[XmlChildNode] = Field(default_factory=list)


class XmlSuiteNode(BaseModel):
    """A <testsuite> element."""

    attributes: dict[str, str] = Field(default_factory=dict)
    testcases: list[XmlTestCaseNode] = Field(default_factory=list)


class XmlContainerNode(BaseModel):
    """Top-level element of an XML report (<testsuites> or <testsuite>)."""

    tag: str = Field(..., description="Element tag")
    attributes: dict[str, str] = Field(default_factory=dict)
    suites: list[XmlSuiteNode] = Field(default_factory=list)


class XmlSuiteDocument(BaseModel):
    """JUnit-style XML report."""

    kind: Literal["xml"] = "xml"
    filepath: str = Field(..., description="Artifact path")
    containers: list[XmlContainerNode] = Field(default_factory=list)


class MochaError(BaseModel):
    """Error attached to a Mocha test; empty for passing tests."""

    estack: str | None = None
    message: str | None = None


class MochaTest(BaseModel):
    """Mocha test entry."""

    title: str = ""
    duration: float | None = None
    fail: bool = False
    pending: bool = False
    code: str | None = None
    err: MochaError | None = None


class MochaSuite(BaseModel):
    """Mocha suite entry, possibly holding nested suites."""

    title: str = ""
    duration: float | None = None
    tests: list[MochaTest] = Field(default_factory=list)
    suites: list["MochaSuite"] = Field(default_factory=list)


class MochaResult(BaseModel):
    """One entry of the Mocha results array (usually one spec file)."""

    suites: list[MochaSuite] = Field(default_factory=list)


class MochaStats(BaseModel):
    """Summary statistics of a Mocha report."""

    tests: int = 0
    failures: int = 0
    skipped: int = 0
    pending: int = 0
    duration: float = 0.0
    start: str | None = None


class MochaReportDocument(BaseModel):
    """Mocha / mochawesome JSON report."""

    kind: Literal["json"] = "json"
    filepath: str = Field(..., description="Artifact path")
    stats: MochaStats
    results: list[MochaResult]


class PerfAnalysisDocument(BaseModel):
    """Flat list of threshold analysis records."""

    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["json-perf"] = "json-perf"
    filepath: str = Field(default="", description="Artifact path")
    analysis: list[AnalysisRecord] = Field(default_factory=list)
    started_at: str | None = Field(default=None, alias="startedAt")


SourceDocument = Annotated[
    XmlSuiteDocument | MochaReportDocument | PerfAnalysisDocument,
    Field(discriminator="kind"),
]
