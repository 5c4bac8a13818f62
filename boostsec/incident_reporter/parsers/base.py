"""Types shared by the report parsers."""

from pydantic import BaseModel, Field


class ParseError(Exception):
    """Raised when an artifact is not a structurally valid document."""

    def __init__(self, filepath: str, reason: str) -> None:
        """Initialize with the offending artifact path and the cause."""
        super().__init__(f"Unable to parse {filepath}: {reason}")
        self.filepath = filepath
        self.reason = reason


class RawArtifact(BaseModel):
    """Report file content read from disk."""

    filepath: str = Field(..., description="Path of the artifact")
    content: str | bytes = Field(..., description="Raw file content")
