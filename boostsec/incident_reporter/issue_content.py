"""Markdown rendering of incident issues and their lifecycle comments."""

from datetime import datetime, timezone

from boostsec.incident_reporter.models.incident import Incident

NO_OUTPUT_TEXT = (
    "No test output is available, please look into the provided link below "
    "or the repository workflows"
)

ABOUT_SECTION = """<details>
<summary>Expand to learn more about these issues</summary>

### About

This issue was opened automatically by a CI/CD workflow (see link above).
A dedup key identifies a failure signature for a given service, it is derived
from the alphabetically sorted list of failing test cases.

- A successful run for a service closes **ALL** open issues of that service,
  whatever their dedup key.
- Two consecutive failures with the same dedup key produce a single issue.
- A closed issue is re-opened when the same failure happens again.

</details>
"""

CLOSE_HEADLINE = "✅ A CI/CD workflow has completed successfully, closing the issue."
REOPEN_HEADLINE = (
    "❌ A CI/CD workflow run with the same dedup key has failed, "
    "re-opening the issue."
)


def build_issue_body(incident: Incident, now: datetime | None = None) -> str:
    """Render the body of a new incident issue.

    The body embeds the dedup key so that later runs can find the issue.

    Args:
        incident: Incident to render
        now: Timestamp to print, defaults to the current UTC time

    Returns:
        Markdown issue body

    """
    body = "An error occurred during the execution of a CI/CD workflow.\n\n"

    if incident.description:
        body += f"### Failure Details\n\n```\n{incident.description}\n```"
    else:
        body += NO_OUTPUT_TEXT

    body += f"\n\n**Service:** {incident.service}"
    body += f"\n**Date:** {_isoformat(now)}"
    if incident.source_url:
        body += f"\n**Source URL:** {incident.source_url}"
    body += f"\n**Dedup Key:** {incident.dedup_key}"

    return f"{body}\n\n{ABOUT_SECTION}"


def build_close_comment(incident: Incident, now: datetime | None = None) -> str:
    """Render the comment posted when a successful run closes an issue."""
    return _lifecycle_comment(CLOSE_HEADLINE, incident, now)


def build_reopen_comment(incident: Incident, now: datetime | None = None) -> str:
    """Render the comment posted when a recurring failure reopens an issue."""
    return _lifecycle_comment(REOPEN_HEADLINE, incident, now)


def _lifecycle_comment(headline: str, incident: Incident, now: datetime | None) -> str:
    return (
        f"{headline}\n\n"
        f"**Details:**\n\n```\n{incident.description}\n```\n\n"
        f"**Date:** {_isoformat(now)}\n"
        f"**Source URL:** {incident.source_url}"
    )


def _isoformat(now: datetime | None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()
