"""Incident orchestrator for reconciling one CI invocation with the tracker."""

import logging
from pathlib import Path

from boostsec.incident_reporter.incidents import (
    force_success,
    incident_from_message,
    incident_from_run,
)
from boostsec.incident_reporter.ingest import ingest_report
from boostsec.incident_reporter.models.incident import Incident
from boostsec.incident_reporter.providers.base import IssueTracker
from boostsec.incident_reporter.reconciler import (
    DedupKeyMatcher,
    IssueReconciler,
    ReconcileAction,
    UnmatchedFailurePolicy,
)

logger = logging.getLogger(__name__)


class IncidentOrchestrator:
    """Builds the incident of an invocation and reconciles it with a tracker."""

    def __init__(
        self,
        tracker: IssueTracker,
        matcher: DedupKeyMatcher | None = None,
        unmatched_policy: UnmatchedFailurePolicy = UnmatchedFailurePolicy.IGNORE,
        dry_run: bool = False,
    ) -> None:
        """Initialize orchestrator with an issue tracker."""
        self.tracker = tracker
        self.reconciler = IssueReconciler(
            tracker,
            matcher=matcher,
            unmatched_policy=unmatched_policy,
            dry_run=dry_run,
        )

    def build_incident(
        self,
        service: str,
        source_type: str = "xml",
        source_path: Path | None = None,
        incident_message: str = "",
        details_path: Path | None = None,
        source_url: str = "",
    ) -> Incident:
        """Build the incident from a report path, or from a message without one."""
        if source_path is not None:
            logger.info(f"Building incident from {source_type} report: {source_path}")
            run = ingest_report(source_type, source_path)
            return incident_from_run(service, run, source_type, source_url)

        logger.info("No report provided, building incident from message")
        return incident_from_message(
            service, incident_message, details_path, source_url
        )

    async def process(
        self,
        service: str,
        source_type: str = "xml",
        source_path: Path | None = None,
        incident_message: str = "",
        details_path: Path | None = None,
        source_url: str = "",
        forced_success: bool = False,
    ) -> tuple[Incident, ReconcileAction]:
        """Run one invocation: build the incident, then reconcile it.

        Args:
            service: Service the incident belongs to
            source_type: Report format ("xml", "json" or "json-perf")
            source_path: Report file or folder, None to use the message
            incident_message: Message used when no report is provided
            details_path: File appended to a message incident description
            source_url: Link to the CI run
            forced_success: Force the failure count to 0

        Returns:
            Tuple of (incident, action applied)

        Raises:
            ParseError: If a report is malformed
            ReconcileError: If the tracker gave up on a call

        """
        incident = self.build_incident(
            service,
            source_type=source_type,
            source_path=source_path,
            incident_message=incident_message,
            details_path=details_path,
            source_url=source_url,
        )
        logger.info(
            f"Incident {incident.dedup_key}: {incident.title} "
            f"(fail: {incident.counts.fail}, total: {incident.counts.total})"
        )

        if forced_success:
            logger.info(
                "Forcing success, the actual failures found were: "
                f"{incident.counts.fail} out of {incident.counts.total} tests"
            )
            incident = force_success(incident)

        if incident.counts.fail > 0:
            assignee = await self.tracker.resolve_assignee(service)
            if assignee:
                logger.info(f"Assignee for {service}: {assignee}")
                incident = incident.model_copy(update={"assignee": assignee})

        action = await self.reconciler.reconcile(incident)
        return incident, action
