"""Verify tool - second opinion from third-party unshortening services."""

import asyncio
import json
import logging
import random
from typing import Any, Iterable
from urllib.parse import quote_plus

from ..config.loader import VerificationConfig
from ..models.consensus import CandidateVote, ConsensusResult, ConsensusStatus
from .probe_tool import HttpProbe

logger = logging.getLogger(__name__)


def build_request_url(endpoint: str, url: str) -> str:
    """Append the percent-encoded target to the endpoint template."""
    return endpoint + quote_plus(url)


def sample_endpoints(
    endpoints: list[str],
    sample_size: int,
    rng: random.Random | None = None,
) -> list[str]:
    """Pick distinct endpoints uniformly at random."""
    unique = list(dict.fromkeys(endpoints))
    rng = rng or random.Random()
    return rng.sample(unique, min(sample_size, len(unique)))


def parse_payload(body: str) -> dict[str, Any] | None:
    """Decode a service response into a string-keyed mapping, or None."""
    try:
        data = json.loads(body)
    except (ValueError, RecursionError):
        return None
    if not isinstance(data, dict):
        return None
    return data


def extract_candidate(payload: dict[str, Any], url: str) -> str | None:
    """
    Response schemas differ per service, so look for the first value whose
    key ends in "url" (or is the short URL itself) and that holds a
    different http:// URL.
    """
    for key, value in payload.items():
        if not (str(key).lower().endswith("url") or key == url):
            continue
        if isinstance(value, str) and value != url and "http://" in value:
            return value
    return None


def decide_consensus(votes: Iterable[CandidateVote], services: list[str] | None = None) -> ConsensusResult:
    """Confirmed only when all votes name the same URL."""
    votes = list(votes)
    distinct = {vote.url for vote in votes}
    if len(distinct) == 1:
        return ConsensusResult(
            status=ConsensusStatus.CONFIRMED,
            url=distinct.pop(),
            votes=votes,
            services=services or [],
        )
    return ConsensusResult(status=ConsensusStatus.NO_CONSENSUS, votes=votes, services=services or [])


async def _query_service(
    endpoint: str,
    url: str,
    probe: HttpProbe,
    timeout: float,
) -> CandidateVote | None:
    """One service's vote, or None. A misbehaving service never fails the whole check."""
    try:
        return await _ask_service(endpoint, url, probe, timeout)
    except Exception as e:
        logger.warning("Verification service %s failed: %s: %s", endpoint, type(e).__name__, e)
        return None


async def _ask_service(
    endpoint: str,
    url: str,
    probe: HttpProbe,
    timeout: float,
) -> CandidateVote | None:
    request_url = build_request_url(endpoint, url)
    try:
        result = await asyncio.wait_for(
            probe.probe(request_url, include_headers=False, timeout=timeout),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.warning("Verification service timed out after %.1fs: %s", timeout, endpoint)
        return None

    if result.error:
        return None
    if result.status_code >= 400:
        logger.debug("Verification service %s answered %s", endpoint, result.status_code)
        return None

    payload = parse_payload(result.body)
    if payload is None:
        logger.debug("Unparseable response from %s", endpoint)
        return None

    candidate = extract_candidate(payload, url)
    if candidate is None:
        logger.debug("No candidate URL in response from %s", endpoint)
        return None
    return CandidateVote(service=endpoint, url=candidate)


async def verify_tool(
    url: str,
    config: VerificationConfig,
    probe: HttpProbe,
    rng: random.Random | None = None,
) -> ConsensusResult:
    """
    Query a random sample of services concurrently and require every
    responding service to agree. Failing services simply do not vote.
    """
    services = sample_endpoints(config.service_endpoints, config.sample_size, rng)
    if len(services) < 2:
        logger.warning("Need at least two verification services, have %d", len(services))
        return decide_consensus([], services)

    answers = await asyncio.gather(
        *(_query_service(endpoint, url, probe, config.timeout_seconds) for endpoint in services)
    )
    votes = [vote for vote in answers if vote is not None]
    consensus = decide_consensus(votes, services)
    logger.info(
        "Verification of %s: %s (%d/%d services voted)",
        url,
        consensus.status.value,
        len(votes),
        len(services),
    )
    return consensus
