"""Structured result of a full unshortening run."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

from .consensus import CandidateVote


class ResolutionStatus(str, Enum):
    """Where the pipeline stopped. Only RESOLVED changes the URL."""

    NOT_SHORTENED = "NOT_SHORTENED"
    NOT_REDIRECT = "NOT_REDIRECT"
    UNRESOLVED = "UNRESOLVED"
    RETRY_LATER = "RETRY_LATER"
    UNVERIFIED = "UNVERIFIED"
    RESOLVED = "RESOLVED"
    CANCELLED = "CANCELLED"


class UnshortenResult(BaseModel):
    """Final answer for one input URL."""

    url: str
    final_url: str
    status: ResolutionStatus
    redirect_chain: list[str] = Field(default_factory=list)
    votes: list[CandidateVote] = Field(default_factory=list)
    verified: bool = False
    resolved_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def changed(self) -> bool:
        return self.final_url != self.url
