"""Issue lifecycle reconciliation.

A pure decision function picks one action from the run outcome and the issues
already tracked for the service; ``IssueReconciler`` performs it against an
issue tracker.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from boostsec.incident_reporter.models.incident import (
    Incident,
    IncidentCounts,
    Issue,
    IssueState,
)
from boostsec.incident_reporter.providers.base import IssueTracker

logger = logging.getLogger(__name__)


class ActionKind(str, Enum):
    """Lifecycle transition applied during one invocation."""

    CREATE = "create"
    CLOSE = "close"
    REOPEN = "reopen"
    NONE = "none"


class UnmatchedFailurePolicy(str, Enum):
    """What to do with a failure matching no closed issue while issues exist."""

    IGNORE = "ignore"
    CREATE = "create"


class ReconcileAction(BaseModel):
    """Decision taken by the reconciler."""

    model_config = ConfigDict(frozen=True)

    kind: ActionKind = Field(..., description="Transition to apply")
    issues: list[Issue] = Field(
        default_factory=list, description="Issues the transition applies to"
    )
    reason: str = Field(default="", description="Why this action was chosen")


class ReconcileError(Exception):
    """Raised when the tracker fails to apply a decided action."""


class DedupKeyMatcher(ABC):
    """Tells whether an issue was raised for a given dedup key."""

    @abstractmethod
    def matches(self, issue: Issue, dedup_key: str) -> bool:
        """Return True if the issue carries the dedup key."""


class BodySubstringMatcher(DedupKeyMatcher):
    """Match issues whose body contains the dedup key."""

    def matches(self, issue: Issue, dedup_key: str) -> bool:
        """Return True if the dedup key appears in the issue body."""
        return bool(dedup_key) and dedup_key in issue.body


def decide(
    counts: IncidentCounts,
    issues: Sequence[Issue],
    dedup_key: str,
    matcher: DedupKeyMatcher | None = None,
    unmatched_policy: UnmatchedFailurePolicy = UnmatchedFailurePolicy.IGNORE,
) -> ReconcileAction:
    """Decide the lifecycle transition for one invocation.

    A passing run closes every open issue of the service, whatever its key.
    A failing run opens the first issue of a service, or reopens the most
    recent closed issue carrying the same dedup key. Any other failing case
    is governed by ``unmatched_policy``.

    Args:
        counts: Counts of the current incident
        issues: Every issue tracked for the service
        dedup_key: Dedup key of the current incident
        matcher: How issues are matched to the dedup key
        unmatched_policy: Behavior when no closed issue matches

    Returns:
        The action to perform

    """
    matcher = matcher or BodySubstringMatcher()

    if counts.fail == 0:
        open_issues = [issue for issue in issues if issue.state == IssueState.OPEN]
        if not open_issues:
            return ReconcileAction(kind=ActionKind.NONE, reason="No open issues")
        return ReconcileAction(
            kind=ActionKind.CLOSE,
            issues=open_issues,
            reason="Run succeeded, closing all open issues",
        )

    if not issues:
        return ReconcileAction(
            kind=ActionKind.CREATE, reason="No issue tracked for the service"
        )

    closed_matches = [
        issue
        for issue in issues
        if issue.state == IssueState.CLOSED and matcher.matches(issue, dedup_key)
    ]
    if closed_matches:
        latest = max(closed_matches, key=lambda issue: issue.created_at)
        return ReconcileAction(
            kind=ActionKind.REOPEN,
            issues=[latest],
            reason="Closed issue found with the same dedup key",
        )

    if unmatched_policy == UnmatchedFailurePolicy.CREATE:
        already_open = any(
            issue.state == IssueState.OPEN and matcher.matches(issue, dedup_key)
            for issue in issues
        )
        if not already_open:
            return ReconcileAction(
                kind=ActionKind.CREATE,
                reason="No issue tracked for this dedup key",
            )

    return ReconcileAction(
        kind=ActionKind.NONE, reason="No closed issue matches the dedup key"
    )


class IssueReconciler:
    """Applies reconciliation decisions through an issue tracker."""

    def __init__(
        self,
        tracker: IssueTracker,
        matcher: DedupKeyMatcher | None = None,
        unmatched_policy: UnmatchedFailurePolicy = UnmatchedFailurePolicy.IGNORE,
        dry_run: bool = False,
    ) -> None:
        """Initialize the reconciler with its tracker and policies."""
        self.tracker = tracker
        self.matcher = matcher or BodySubstringMatcher()
        self.unmatched_policy = unmatched_policy
        self.dry_run = dry_run

    async def reconcile(self, incident: Incident) -> ReconcileAction:
        """List the service issues, decide, then apply the decision.

        Mutations are awaited one at a time. Tracker exceptions propagate.

        Raises:
            ReconcileError: If the tracker gave up retrying a call

        """
        issues = await self.tracker.list_issues(incident.service)
        if issues is None:
            raise ReconcileError(
                f"Failed to list issues for service: {incident.service}"
            )
        logger.info(f"Found {len(issues)} issues for service: {incident.service}")

        action = decide(
            incident.counts,
            issues,
            incident.dedup_key,
            matcher=self.matcher,
            unmatched_policy=self.unmatched_policy,
        )
        logger.info(f"Reconcile decision: {action.kind.value} ({action.reason})")

        if self.dry_run:
            logger.info("Dry run, no change applied to the tracker")
            return action

        if action.kind == ActionKind.CREATE:
            created = await self.tracker.create_issue(incident)
            if created is None:
                raise ReconcileError(
                    f"Failed to create issue for service: {incident.service}"
                )
            logger.info(f"Created issue #{created.number}: {created.url}")
            return action.model_copy(update={"issues": [created]})

        for issue in action.issues:
            if action.kind == ActionKind.CLOSE:
                logger.info(f"Closing issue #{issue.number} ({issue.url})")
                applied = await self.tracker.close_issue(issue, incident)
            else:
                logger.info(f"Reopening issue #{issue.number} ({issue.url})")
                applied = await self.tracker.reopen_issue(issue, incident)

            if not applied:
                raise ReconcileError(
                    f"Failed to {action.kind.value} issue #{issue.number}"
                )

        return action
