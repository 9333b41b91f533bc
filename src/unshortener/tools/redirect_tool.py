"""Redirect tool - follow a redirect chain hop by hop."""

import logging
import re

from ..models.redirect_outcome import RedirectOutcome
from .probe_tool import HttpProbe, ProbeResult

logger = logging.getLogger(__name__)

LOCATION_PATTERN = re.compile(r"^Location:[ \t]*(https?://\S+)", re.IGNORECASE | re.MULTILINE)

DEFAULT_MAX_HOPS = 20


def extract_location(header_block: str) -> str | None:
    """First Location header holding an absolute http(s) URL, or None."""
    match = LOCATION_PATTERN.search(header_block)
    if not match:
        return None
    return match.group(1)


async def redirect_tool(
    url: str,
    probe: HttpProbe,
    max_hops: int = DEFAULT_MAX_HOPS,
    first: ProbeResult | None = None,
) -> RedirectOutcome:
    """
    Resolve url by probing each hop until a 200 answers.

    first: an already-made probe of url, reused instead of probing again.
    Returns UNRESOLVED on transport errors, missing or self-referencing
    Location headers, cycles, unexpected status codes and chains longer
    than max_hops. A 503 on a hop yields RETRY_LATER.
    """
    current = url
    result = first if first is not None else await probe.probe(url, include_headers=True)
    chain = [url]
    visited = {url}

    if result.error:
        return RedirectOutcome.unresolved(f"transport failure: {result.error}", chain)
    if not result.is_redirect:
        return RedirectOutcome.unresolved(f"status {result.status_code} is not a redirect", chain)

    for hop in range(1, max_hops + 1):
        location = extract_location(result.header_block)
        if location is None:
            return RedirectOutcome.unresolved(f"no absolute Location header from {current}", chain)
        if location == current:
            return RedirectOutcome.unresolved(f"{current} redirects to itself", chain)
        if location in visited:
            logger.warning("Redirect loop detected at %s (hop %d)", location, hop)
            return RedirectOutcome.unresolved(f"redirect loop at {location}", chain + [location])

        visited.add(location)
        chain.append(location)
        logger.debug("Hop %d: %s -> %s", hop, current, location)

        result = await probe.probe(location, include_headers=True)
        if result.error:
            return RedirectOutcome.unresolved(f"transport failure: {result.error}", chain)
        if result.status_code == 200:
            return RedirectOutcome.resolved(location, chain)
        if result.status_code == 503:
            logger.warning("%s answered 503, try again later", location)
            return RedirectOutcome.retry_later(location, chain)
        if not result.is_redirect:
            return RedirectOutcome.unresolved(f"status {result.status_code} from {location}", chain)
        current = location

    logger.warning("Gave up on %s after %d hops", url, max_hops)
    return RedirectOutcome.unresolved(f"more than {max_hops} hops", chain)
