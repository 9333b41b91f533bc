"""Classify tool - decide whether a URL looks like a shortener link."""

import re

SCHEME_PREFIX = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
HANDLE_PATTERN = re.compile(r"[a-zA-Z0-9_-]+")

MIN_DOMAIN_LABEL = 1
MAX_DOMAIN_LABEL = 7


def _domain_label(remainder: str) -> str | None:
    """Second-level label; with a subdomain (u.short.it) it is the one after the first dot."""
    parts = remainder.split(".")
    if len(parts) < 2:
        return None
    if len(parts) == 2:
        return parts[0]
    return parts[1]


def classify_tool(url: str) -> bool:
    """
    Heuristic check for shortened URLs. Never touches the network and
    never raises; malformed input is simply "not shortened".
    """
    lowered = url.lower()
    # Shorteners issue neither https nor www links
    if "https://" in lowered or "://www." in lowered:
        return False

    remainder = SCHEME_PREFIX.sub("", url, count=1)
    segments = remainder.split("/")

    label = _domain_label(remainder)
    if label is None:
        return False
    if not MIN_DOMAIN_LABEL <= len(label) <= MAX_DOMAIN_LABEL:
        return False

    # Exactly one handle segment after the host
    if len(segments) > 2:
        return False

    handle = segments[1] if len(segments) == 2 else ""
    if not HANDLE_PATTERN.fullmatch(handle):
        return False

    return True
