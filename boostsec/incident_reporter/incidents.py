"""Build incidents from ingested runs or from free-text messages."""

import logging
from pathlib import Path

from boostsec.incident_reporter.dedup import dedup_key_from_message, dedup_key_from_run
from boostsec.incident_reporter.models.incident import Incident, IncidentCounts
from boostsec.incident_reporter.models.report import Run
from boostsec.incident_reporter.summary import build_summary

logger = logging.getLogger(__name__)

DEFAULT_INCIDENT_MESSAGE = "Incident occurred (no error message provided)"


def incident_from_run(
    service: str, run: Run, source_type: str, source_url: str = ""
) -> Incident:
    """Build the incident describing a run.

    Args:
        service: Service the run belongs to
        run: Ingested run
        source_type: Source type the run was ingested from
        source_url: Link to the CI run

    Returns:
        Incident keyed on the failing tests of the run

    """
    plural = "" if run.failures == 1 else "s"
    return Incident(
        dedup_key=dedup_key_from_run(service, run),
        title=(
            f"{service} - FAIL {run.failures}/{run.tests} test{plural} "
            "during test execution"
        ),
        description=build_summary(run, source_type),
        service=service,
        source_url=source_url,
        counts=IncidentCounts(
            total=run.tests,
            fail=run.failures,
            success=run.tests - run.failures - run.skipped,
            skip=run.skipped,
        ),
    )


def incident_from_message(
    service: str,
    message: str,
    details_path: Path | None = None,
    source_url: str = "",
) -> Incident:
    """Build an incident from a message when no test report is available.

    The incident always counts as one failure. When ``details_path`` points to
    an existing file, its content is appended to the description.
    """
    message = message or DEFAULT_INCIDENT_MESSAGE
    title = f"{service} - {message}"

    description = message
    if details_path is not None:
        if details_path.exists():
            description += f"\n\n{details_path.read_text(encoding='utf-8')}"
        else:
            logger.warning(f"Incident details file not found: {details_path}")

    return Incident(
        dedup_key=dedup_key_from_message(service, message),
        title=title,
        description=description,
        service=service,
        source_url=source_url,
        counts=IncidentCounts(total=1, fail=1),
    )


def force_success(incident: Incident) -> Incident:
    """Mark an incident as successful so reconciliation closes open issues."""
    return incident.model_copy(
        update={
            "counts": incident.counts.model_copy(update={"fail": 0, "total": 0})
        }
    )
