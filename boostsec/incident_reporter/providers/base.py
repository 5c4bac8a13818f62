"""Abstract base class for issue trackers."""

from abc import ABC, abstractmethod

from boostsec.incident_reporter.models.incident import Incident, Issue


class IssueTracker(ABC):
    """Abstract base for the issue trackers incidents are reconciled against.

    Implementations retry rate-limited calls themselves. Once retries are
    exhausted, calls return ``None`` or ``False`` instead of raising.
    """

    @abstractmethod
    async def list_issues(self, service: str) -> list[Issue] | None:
        """List every issue, open or closed, tracked for a service.

        Args:
            service: Service name the issues are searched for

        Returns:
            Issues of the service in no particular order, or None if the
            tracker gave up retrying

        """

    @abstractmethod
    async def create_issue(self, incident: Incident) -> Issue | None:
        """Open a new issue embedding the incident dedup key.

        Returns:
            The created issue, or None if the tracker gave up retrying

        """

    @abstractmethod
    async def close_issue(self, issue: Issue, incident: Incident) -> bool:
        """Close an issue with a success comment.

        Returns:
            False if the tracker gave up retrying

        """

    @abstractmethod
    async def reopen_issue(self, issue: Issue, incident: Incident) -> bool:
        """Reopen an issue with a failure comment.

        Returns:
            False if the tracker gave up retrying

        """

    @abstractmethod
    async def resolve_assignee(self, service: str) -> str:
        """Find who should be assigned issues for a service.

        Returns:
            Login of the assignee, or an empty string if none is configured

        """
