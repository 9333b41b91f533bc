"""Resolve shortened URLs by probing their redirects and cross-checking third-party services."""

from .agent.unshorten_agent import Unshortener, check_and_unshorten, resolve, resolve_async
from .config.loader import Config, load_config
from .tools.classify_tool import classify_tool as classify

__version__ = "0.1.0"

__all__ = [
    "Unshortener",
    "check_and_unshorten",
    "resolve",
    "resolve_async",
    "classify",
    "Config",
    "load_config",
]
