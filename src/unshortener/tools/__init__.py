"""Pipeline tools for the URL unshortener."""

from .classify_tool import classify_tool
from .probe_tool import HttpProbe, ProbeResult
from .redirect_tool import redirect_tool, extract_location
from .verify_tool import verify_tool, extract_candidate, decide_consensus

__all__ = [
    "classify_tool",
    "HttpProbe",
    "ProbeResult",
    "redirect_tool",
    "extract_location",
    "verify_tool",
    "extract_candidate",
    "decide_consensus",
]
