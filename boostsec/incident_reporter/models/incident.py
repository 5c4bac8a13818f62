"""Models for incidents and the tracker issues they are reconciled against."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class IncidentCounts(BaseModel):
    """Test counts summarizing the run behind an incident."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(default=0, description="Total number of tests")
    fail: int = Field(default=0, description="Number of failing tests")
    success: int = Field(default=0, description="Number of passing tests")
    skip: int = Field(default=0, description="Number of skipped tests")


class Incident(BaseModel):
    """Incident derived from a run or from a free-text message."""

    model_config = ConfigDict(frozen=True)

    dedup_key: str = Field(..., description="Stable failure signature")
    title: str = Field(..., description="Issue title")
    description: str = Field(default="", description="Failure details")
    service: str = Field(..., description="Service the incident belongs to")
    source_url: str = Field(default="", description="Link to the CI run")
    assignee: str | None = Field(default=None, description="Issue assignee")
    counts: IncidentCounts = Field(
        default_factory=IncidentCounts, description="Run counts"
    )


class IssueState(str, Enum):
    """Lifecycle state of a tracker issue."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"


class Issue(BaseModel):
    """Issue as reported by the tracker."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Tracker node identifier")
    number: int = Field(..., description="Issue number")
    url: str = Field(default="", description="Issue URL")
    state: IssueState = Field(..., description="Issue state")
    title: str = Field(default="", description="Issue title")
    body: str = Field(default="", description="Issue body")
    created_at: datetime = Field(..., description="Creation timestamp")
