"""Data models for the URL unshortener."""

from .redirect_outcome import RedirectOutcome, RedirectStatus
from .consensus import CandidateVote, ConsensusResult, ConsensusStatus
from .unshorten_result import UnshortenResult, ResolutionStatus

__all__ = [
    "RedirectOutcome",
    "RedirectStatus",
    "CandidateVote",
    "ConsensusResult",
    "ConsensusStatus",
    "UnshortenResult",
    "ResolutionStatus",
]
