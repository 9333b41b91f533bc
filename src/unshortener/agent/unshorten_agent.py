"""Unshorten agent - control plane for the classify → resolve → verify pipeline."""

import asyncio
import logging
import random

import httpx
from tenacity import AsyncRetrying, retry_if_result, stop_after_attempt, wait_exponential

from ..config.loader import Config
from ..models.redirect_outcome import RedirectStatus
from ..models.unshorten_result import ResolutionStatus, UnshortenResult
from ..tools.classify_tool import classify_tool
from ..tools.probe_tool import HttpProbe, ProbeResult
from ..tools.redirect_tool import redirect_tool
from ..tools.verify_tool import verify_tool

logger = logging.getLogger(__name__)


class Unshortener:
    """
    Unshortener runs one URL through the pipeline and returns the input
    unchanged on every inconclusive path.
    Owns one HTTP client; use as an async context manager or call aclose().
    """

    def __init__(
        self,
        config: Config | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        rng: random.Random | None = None,
    ):
        self.config = config or Config()
        self.probe = HttpProbe(self.config.probe, transport=transport)
        self.rng = rng

    async def __aenter__(self) -> "Unshortener":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.probe.aclose()

    async def check_and_unshorten(self, url: str, deadline: float | None = None) -> str:
        """Unshortened URL if every check passed, otherwise url itself."""
        result = await self.unshorten(url, deadline=deadline)
        return result.final_url

    async def unshorten(self, url: str, deadline: float | None = None) -> UnshortenResult:
        """
        Run the pipeline under a deadline (seconds; falls back to
        config.deadline_seconds). When it expires the input URL is returned.
        """
        deadline = deadline if deadline is not None else self.config.deadline_seconds
        if deadline is None:
            return await self._run(url)
        try:
            return await asyncio.wait_for(self._run(url), timeout=deadline)
        except asyncio.TimeoutError:
            logger.warning("Deadline of %.1fs exceeded for %s", deadline, url)
            return UnshortenResult(url=url, final_url=url, status=ResolutionStatus.CANCELLED)

    async def _run(self, url: str) -> UnshortenResult:
        if not classify_tool(url):
            logger.debug("Not a shortened URL: %s", url)
            return UnshortenResult(url=url, final_url=url, status=ResolutionStatus.NOT_SHORTENED)

        first = await self._probe_with_retry(url)
        if first.error:
            return UnshortenResult(url=url, final_url=url, status=ResolutionStatus.UNRESOLVED)
        if not first.is_redirect:
            logger.info("%s looks shortened but answered %s", url, first.status_code)
            return UnshortenResult(url=url, final_url=url, status=ResolutionStatus.NOT_REDIRECT)

        outcome = await redirect_tool(url, self.probe, max_hops=self.config.probe.max_hops, first=first)
        if outcome.status == RedirectStatus.RETRY_LATER:
            logger.warning("Shortener temporarily unavailable for %s (503 at %s)", url, outcome.url)
            return UnshortenResult(
                url=url,
                final_url=url,
                status=ResolutionStatus.RETRY_LATER,
                redirect_chain=outcome.chain,
            )
        if not outcome.is_resolved:
            logger.info("Could not resolve %s: %s", url, outcome.reason)
            return UnshortenResult(
                url=url,
                final_url=url,
                status=ResolutionStatus.UNRESOLVED,
                redirect_chain=outcome.chain,
            )

        resolved = outcome.url
        if not self.config.verification.enabled:
            logger.info("Resolved %s -> %s", url, resolved)
            return UnshortenResult(
                url=url,
                final_url=resolved,
                status=ResolutionStatus.RESOLVED,
                redirect_chain=outcome.chain,
            )

        consensus = await verify_tool(url, self.config.verification, self.probe, rng=self.rng)
        if consensus.is_confirmed and consensus.url == resolved:
            logger.info("Resolved and verified %s -> %s", url, resolved)
            return UnshortenResult(
                url=url,
                final_url=resolved,
                status=ResolutionStatus.RESOLVED,
                redirect_chain=outcome.chain,
                votes=consensus.votes,
                verified=True,
            )

        logger.info(
            "Keeping %s: local answer %s not confirmed (consensus=%s)",
            url,
            resolved,
            consensus.url if consensus.is_confirmed else consensus.status.value,
        )
        return UnshortenResult(
            url=url,
            final_url=url,
            status=ResolutionStatus.UNVERIFIED,
            redirect_chain=outcome.chain,
            votes=consensus.votes,
        )

    async def _probe_with_retry(self, url: str) -> ProbeResult:
        """Probe with retry for transport failures; the last result is returned either way."""
        policy = self.config.retry_policy
        retrying = AsyncRetrying(
            stop=stop_after_attempt(policy.max_attempts),
            wait=wait_exponential(multiplier=policy.backoff_seconds, max=10),
            retry=retry_if_result(lambda r: r.error is not None),
            retry_error_callback=lambda state: state.outcome.result(),
        )
        return await retrying(self.probe.probe, url, include_headers=True)


async def resolve_async(
    url: str,
    external_verification_enabled: bool = True,
    config: Config | None = None,
    deadline: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Resolve url; always returns a string, the input when inconclusive."""
    config = (config or Config()).with_verification(external_verification_enabled)
    async with Unshortener(config, transport=transport) as unshortener:
        return await unshortener.check_and_unshorten(url, deadline=deadline)


def resolve(
    url: str,
    external_verification_enabled: bool = True,
    config: Config | None = None,
    deadline: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """
    Blocking wrapper around resolve_async. It starts its own event loop
    with asyncio.run, so it cannot be called from a running loop; async
    callers must await resolve_async instead.
    """
    return asyncio.run(
        resolve_async(url, external_verification_enabled, config, deadline, transport)
    )


def check_and_unshorten(url: str, config: Config | None = None) -> str:
    """Resolve url using the config's own verification switch."""
    config = config or Config()
    return resolve(url, config.verification.enabled, config)
