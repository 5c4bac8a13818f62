"""Tests for provider configuration models."""

import pytest
from pydantic import ValidationError

from boostsec.incident_reporter.models.provider_config import GitHubConfig


def test_github_config_valid() -> None:
    """GitHubConfig accepts required fields and applies defaults."""
    config = GitHubConfig(token="ghp_token123", repository="acme/incidents")

    assert config.token == "ghp_token123"
    assert config.repository == "acme/incidents"
    assert config.base_url == "https://api.github.com"
    assert config.issue_label == "incident"
    assert config.assignee_property == "Champion"
    assert config.assignee is None
    assert config.max_attempts == 3
    assert config.retry_delay == 5.0


def test_github_config_owner_and_repo() -> None:
    """GitHubConfig splits the repository into owner and repo."""
    config = GitHubConfig(token="token", repository="acme/incidents")

    assert config.owner == "acme"
    assert config.repo == "incidents"


@pytest.mark.parametrize("repository", ["incidents", "acme/", "/incidents", "a/b/c"])
def test_github_config_invalid_repository(repository: str) -> None:
    """GitHubConfig rejects repositories not in owner/repo format."""
    with pytest.raises(ValidationError, match="owner/repo format"):
        GitHubConfig(token="token", repository=repository)


def test_github_config_missing_fields() -> None:
    """GitHubConfig requires token and repository."""
    with pytest.raises(ValidationError) as exc_info:
        GitHubConfig(token="token")  # type: ignore[call-arg]
    assert "repository" in str(exc_info.value)


def test_github_config_rejects_zero_attempts() -> None:
    """GitHubConfig requires at least one attempt per request."""
    with pytest.raises(ValidationError):
        GitHubConfig(token="token", repository="acme/incidents", max_attempts=0)
