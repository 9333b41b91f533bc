"""Outcome of following a redirect chain."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class RedirectStatus(str, Enum):
    """How a redirect chain ended."""

    RESOLVED = "RESOLVED"
    UNRESOLVED = "UNRESOLVED"
    RETRY_LATER = "RETRY_LATER"  # backend answered 503


class RedirectOutcome(BaseModel):
    """Result of resolving one URL hop by hop."""

    status: RedirectStatus
    url: Optional[str] = Field(None, description="Resolved target, or the URL that answered 503")
    chain: list[str] = Field(default_factory=list, description="URLs probed, in order")
    reason: str = ""

    @classmethod
    def resolved(cls, url: str, chain: list[str]) -> "RedirectOutcome":
        return cls(status=RedirectStatus.RESOLVED, url=url, chain=chain)

    @classmethod
    def unresolved(cls, reason: str, chain: list[str] | None = None) -> "RedirectOutcome":
        return cls(status=RedirectStatus.UNRESOLVED, chain=chain or [], reason=reason)

    @classmethod
    def retry_later(cls, url: str, chain: list[str]) -> "RedirectOutcome":
        return cls(
            status=RedirectStatus.RETRY_LATER,
            url=url,
            chain=chain,
            reason="service unavailable (503)",
        )

    @property
    def is_resolved(self) -> bool:
        return self.status == RedirectStatus.RESOLVED
