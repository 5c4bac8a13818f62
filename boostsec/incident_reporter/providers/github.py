"""GitHub issue tracker implementation."""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from boostsec.incident_reporter.issue_content import (
    build_close_comment,
    build_issue_body,
    build_reopen_comment,
)
from boostsec.incident_reporter.models.incident import Incident, Issue, IssueState
from boostsec.incident_reporter.models.provider_config import GitHubConfig
from boostsec.incident_reporter.providers.base import IssueTracker

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"

SEARCH_ISSUES_QUERY = """
query($searchQuery: String!, $cursor: String) {
  search(query: $searchQuery, type: ISSUE, first: 100, after: $cursor) {
    edges {
      node {
        ... on Issue {
          id
          number
          title
          body
          state
          url
          createdAt
        }
      }
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
"""

CLOSE_ISSUE_MUTATION = """
mutation($issueId: ID!, $comment: String!, $reason: IssueClosedStateReason) {
  addComment(input: { subjectId: $issueId, body: $comment }) {
    clientMutationId
  }
  closeIssue(input: { issueId: $issueId, stateReason: $reason }) {
    clientMutationId
  }
}
"""

REOPEN_ISSUE_MUTATION = """
mutation($issueId: ID!, $comment: String!) {
  addComment(input: { subjectId: $issueId, body: $comment }) {
    clientMutationId
  }
  reopenIssue(input: { issueId: $issueId }) {
    clientMutationId
  }
}
"""


class GitHubIssueTracker(IssueTracker):
    """Issue tracker backed by GitHub issues."""

    def __init__(self, config: GitHubConfig) -> None:
        """Initialize GitHub issue tracker with configuration."""
        self.config = config
        self.base_url = config.base_url

    async def list_issues(self, service: str) -> list[Issue] | None:
        """Search the repository issues mentioning the service."""
        variables: dict[str, object] = {
            "searchQuery": f"repo:{self.config.repository} {service}",
            "cursor": None,
        }
        issues: list[Issue] = []

        async with aiohttp.ClientSession() as session:
            while True:
                data = await self._graphql(
                    session, SEARCH_ISSUES_QUERY, variables, "search issues"
                )
                if data is None:
                    return None

                search = data["search"]
                for edge in search["edges"]:
                    node = edge.get("node") or {}
                    if "id" in node:
                        issues.append(self._parse_issue(node))

                page_info = search["pageInfo"]
                if not page_info["hasNextPage"]:
                    break
                variables["cursor"] = page_info["endCursor"]

        return issues

    async def create_issue(self, incident: Incident) -> Issue | None:
        """Open an issue for the incident."""
        url = f"{self.base_url}/repos/{self.config.owner}/{self.config.repo}/issues"
        payload = {
            "title": incident.title,
            "body": build_issue_body(incident),
            "labels": [self.config.issue_label],
            "assignees": [incident.assignee] if incident.assignee else [],
        }

        logger.info(f"Creating issue: {incident.title}")
        async with aiohttp.ClientSession() as session:
            data = await self._request(
                session, "POST", url, "create issue", expected=201, json=payload
            )

        if data is None:
            return None

        return Issue(
            id=data["node_id"],
            number=data["number"],
            url=data.get("html_url", ""),
            state=IssueState.OPEN,
            title=data.get("title", incident.title),
            body=data.get("body") or "",
            created_at=data["created_at"],
        )

    async def close_issue(self, issue: Issue, incident: Incident) -> bool:
        """Comment on an issue and close it as completed."""
        variables = {
            "issueId": issue.id,
            "comment": build_close_comment(incident),
            "reason": "COMPLETED",
        }
        async with aiohttp.ClientSession() as session:
            data = await self._graphql(
                session, CLOSE_ISSUE_MUTATION, variables, "close issue"
            )
        return data is not None

    async def reopen_issue(self, issue: Issue, incident: Incident) -> bool:
        """Comment on an issue and reopen it."""
        variables = {"issueId": issue.id, "comment": build_reopen_comment(incident)}
        async with aiohttp.ClientSession() as session:
            data = await self._graphql(
                session, REOPEN_ISSUE_MUTATION, variables, "reopen issue"
            )
        return data is not None

    async def resolve_assignee(self, service: str) -> str:
        """Read the assignee from the repository custom properties.

        A fixed assignee in the configuration takes precedence over the lookup.
        """
        if self.config.assignee:
            return self.config.assignee

        url = (
            f"{self.base_url}/repos/{self.config.owner}/{self.config.repo}/"
            "properties/values"
        )
        async with aiohttp.ClientSession() as session:
            properties = await self._request(
                session, "GET", url, "get repository properties", expected=200
            )

        if not isinstance(properties, list):
            logger.warning(f"No repository properties available for: {service}")
            return ""

        for prop in properties:
            if (
                isinstance(prop, dict)
                and prop.get("property_name") == self.config.assignee_property
                and isinstance(prop.get("value"), str)
            ):
                return prop["value"]

        logger.info(
            f"Repository property {self.config.assignee_property} is not set, "
            "issues will not be assigned"
        )
        return ""

    async def _graphql(
        self,
        session: aiohttp.ClientSession,
        query: str,
        variables: Mapping[str, object],
        operation: str,
    ) -> Any | None:
        """Run a GraphQL query, returning its data or None once rate limited."""
        payload = {"query": query, "variables": dict(variables)}
        response = await self._request(
            session,
            "POST",
            f"{self.base_url}/graphql",
            operation,
            expected=200,
            json=payload,
        )
        if response is None:
            return None

        errors = response.get("errors")
        if errors:
            raise RuntimeError(f"Failed to {operation}: {errors}")

        return response.get("data") or {}

    async def _request(
        self,
        session: aiohttp.ClientSession,
        method: str,
        url: str,
        operation: str,
        expected: int,
        **kwargs: Any,
    ) -> Any | None:
        """Send a request, retrying with a fixed delay while rate limited.

        Returns:
            Decoded JSON response, or None once every attempt was rate limited

        Raises:
            RuntimeError: If GitHub answers with an unexpected status

        """
        headers = {
            "Authorization": f"Bearer {self.config.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }

        for attempt in range(1, self.config.max_attempts + 1):
            async with session.request(
                method, url, headers=headers, **kwargs
            ) as response:
                if response.status != 429:
                    if response.status != expected:
                        text = await response.text()
                        raise RuntimeError(
                            f"Failed to {operation}: {response.status} {text}"
                        )
                    return await response.json()

            logger.warning(
                f"Rate limited while trying to {operation} "
                f"(attempt {attempt}/{self.config.max_attempts})"
            )
            if attempt < self.config.max_attempts:
                await asyncio.sleep(self.config.retry_delay)

        logger.error(
            f"Giving up on {operation} after {self.config.max_attempts} attempts"
        )
        return None

    def _parse_issue(self, node: Mapping[str, object]) -> Issue:
        """Build an issue from a GraphQL search node."""
        return Issue.model_validate(
            {
                "id": node["id"],
                "number": node["number"],
                "url": node.get("url") or "",
                "state": node["state"],
                "title": node.get("title") or "",
                "body": node.get("body") or "",
                "created_at": node["createdAt"],
            }
        )
