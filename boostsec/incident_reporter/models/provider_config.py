"""Configuration models for issue tracker providers."""

from pydantic import BaseModel, Field, field_validator


class GitHubConfig(BaseModel):
    """Configuration for the GitHub issue tracker."""

    token: str = Field(..., description="GitHub personal access token or GITHUB_TOKEN")
    repository: str = Field(
        ..., description="Repository holding the incident issues (owner/repo)"
    )
    base_url: str = Field(
        default="https://api.github.com", description="GitHub API base URL"
    )
    issue_label: str = Field(
        default="incident", description="Label applied to created issues"
    )
    assignee_property: str = Field(
        default="Champion",
        description="Repository custom property holding the default assignee",
    )
    assignee: str | None = Field(
        default=None, description="Fixed assignee, skips the property lookup"
    )
    max_attempts: int = Field(
        default=3, ge=1, description="Attempts per request when rate limited"
    )
    retry_delay: float = Field(
        default=5.0, ge=0, description="Seconds to wait after a rate-limited call"
    )

    @field_validator("repository")
    @classmethod
    def _check_repository(cls, value: str) -> str:
        owner, _, repo = value.partition("/")
        if not owner or not repo or "/" in repo:
            raise ValueError(
                f"repository must be in owner/repo format, got: {value}"
            )
        return value

    @property
    def owner(self) -> str:
        """Repository owner."""
        return self.repository.split("/", 1)[0]

    @property
    def repo(self) -> str:
        """Repository name."""
        return self.repository.split("/", 1)[-1]
