"""Votes from verification services and the consensus derived from them."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ConsensusStatus(str, Enum):
    CONFIRMED = "CONFIRMED"
    NO_CONSENSUS = "NO_CONSENSUS"


class CandidateVote(BaseModel):
    """A URL extracted from one service's response."""

    service: str = Field(..., description="Endpoint template that produced the vote")
    url: str


class ConsensusResult(BaseModel):
    """
    Outcome of one verification attempt.
    CONFIRMED only when every responding service named the same URL.
    """

    status: ConsensusStatus
    url: Optional[str] = None
    votes: list[CandidateVote] = Field(default_factory=list)
    services: list[str] = Field(default_factory=list, description="Endpoints sampled for this attempt")

    @property
    def is_confirmed(self) -> bool:
        return self.status == ConsensusStatus.CONFIRMED
