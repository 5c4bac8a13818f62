"""Ingest report files of any supported format into a canonical run."""

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from boostsec.incident_reporter.aggregator import build_run
from boostsec.incident_reporter.models.documents import (
    MochaReportDocument,
    SourceDocument,
    XmlSuiteDocument,
)
from boostsec.incident_reporter.models.report import Report, Run
from boostsec.incident_reporter.parsers.base import RawArtifact
from boostsec.incident_reporter.parsers.json_report import (
    load_mocha_document,
    mocha_document_to_report,
)
from boostsec.incident_reporter.parsers.perf_report import (
    analysis_to_reports,
    load_perf_document,
)
from boostsec.incident_reporter.parsers.xml_report import (
    load_xml_document,
    xml_document_to_reports,
)
from boostsec.incident_reporter.report_finder import find_report_files

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = {"xml": "xml", "json": "json", "json-perf": "json"}

_LOADERS: dict[str, Callable[[RawArtifact], SourceDocument | None]] = {
    "xml": load_xml_document,
    "json": load_mocha_document,
    "json-perf": load_perf_document,
}


def read_artifacts(paths: Sequence[Path]) -> list[RawArtifact]:
    """Read report files from disk.

    Content is kept as bytes so each parser decodes it the way its format
    declares (XML encoding declaration, JSON UTF-8/16/32 detection).
    """
    return [
        RawArtifact(filepath=str(path), content=path.read_bytes()) for path in paths
    ]


def load_document(source_type: str, artifact: RawArtifact) -> SourceDocument | None:
    """Validate an artifact into the document variant of its source type.

    Raises:
        ValueError: If the source type is not supported
        ParseError: If the artifact is not a valid document of that type

    """
    loader = _LOADERS.get(source_type)
    if loader is None:
        raise ValueError(
            f"{source_type} is not a supported format. "
            f"Must be one of: {', '.join(SOURCE_EXTENSIONS)}"
        )
    return loader(artifact)


def document_to_reports(document: SourceDocument) -> list[Report]:
    """Map any source document onto canonical reports."""
    if isinstance(document, XmlSuiteDocument):
        return xml_document_to_reports(document)
    if isinstance(document, MochaReportDocument):
        return [mocha_document_to_report(document)]
    return analysis_to_reports(document.analysis)


def ingest_artifacts(source_type: str, artifacts: Sequence[RawArtifact]) -> Run:
    """Parse already-read artifacts of one source type into a run."""
    reports: list[Report] = []
    for artifact in artifacts:
        document = load_document(source_type, artifact)
        if document is not None:
            reports.extend(document_to_reports(document))
    return build_run(reports)


def ingest_report(source_type: str, source_path: Path) -> Run:
    """Ingest a report file, or a folder of report files, into a run.

    Args:
        source_type: One of "xml", "json", "json-perf"
        source_path: Report file or directory containing reports

    Returns:
        Run aggregating every report found

    Raises:
        ValueError: If the source type is not supported
        FileNotFoundError: If the source path doesn't exist
        ParseError: If a report file is malformed

    """
    extension = SOURCE_EXTENSIONS.get(source_type)
    if extension is None:
        raise ValueError(
            f"{source_type} is not a supported format. "
            f"Must be one of: {', '.join(SOURCE_EXTENSIONS)}"
        )

    files = find_report_files(source_path, extension)
    logger.info(f"Ingesting {len(files)} {source_type} report files")

    run = ingest_artifacts(source_type, read_artifacts(files))
    logger.info(
        f"Ingested {len(run.reports)} reports: {run.tests} tests, "
        f"{run.failures} failures, {run.skipped} skipped, {run.pending} pending"
    )
    return run
