"""Shared fixtures: a scripted HTTP backend served through httpx.MockTransport."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List, Union

import httpx
import pytest

from unshortener.config.loader import Config
from unshortener.tools.probe_tool import HttpProbe

SERVICE_A = "http://svc-a.test/expand?format=json&url="
SERVICE_B = "http://svc-b.test/?url="

Reply = Union[httpx.Response, Exception, "Slow"]


class Slow:  # pylint: disable=too-few-public-methods
    """A reply that only arrives after `delay` seconds."""

    def __init__(self, reply: httpx.Response, delay: float = 5.0) -> None:
        self.reply = reply
        self.delay = delay


def redirect(location: str, status: int = 301) -> httpx.Response:
    return httpx.Response(status, headers={"Location": location})


def ok(text: str = "<html></html>") -> httpx.Response:
    return httpx.Response(200, text=text)


def service_json(payload: Any) -> httpx.Response:
    return httpx.Response(200, text=json.dumps(payload), headers={"Content-Type": "application/json"})


class FakeWeb:
    """
    Routes requests by full URL, or by host for verification services.
    Unknown URLs answer 404. Every requested URL is recorded.
    """

    def __init__(self) -> None:
        self.routes: Dict[str, Reply] = {}
        self.hosts: Dict[str, Reply] = {}
        self.requests: List[str] = []

    def route(self, url: str, reply: Reply) -> "FakeWeb":
        self.routes[url] = reply
        return self

    def service(self, endpoint: str, reply: Reply) -> "FakeWeb":
        self.hosts[httpx.URL(endpoint).host] = reply
        return self

    def requested_hosts(self) -> List[str]:
        return [httpx.URL(u).host for u in self.requests]

    def count(self, url: str) -> int:
        return sum(1 for u in self.requests if u.rstrip("/") == url.rstrip("/"))

    async def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        reply = self.hosts.get(request.url.host)
        if reply is None:
            reply = self.routes.get(url, self.routes.get(url.rstrip("/")))
        if isinstance(reply, list):
            # a list is replayed in order, its last item repeating
            reply = reply.pop(0) if len(reply) > 1 else reply[0]
        if reply is None:
            return httpx.Response(404)
        if isinstance(reply, Slow):
            await asyncio.sleep(reply.delay)
            reply = reply.reply
        if isinstance(reply, Exception):
            raise reply
        return httpx.Response(reply.status_code, headers=reply.headers, content=reply.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def web() -> FakeWeb:
    return FakeWeb()


@pytest.fixture
def config() -> Config:
    """Two services (so sampling always picks both), no retry backoff."""
    return Config.from_dict(
        {
            "probe": {"timeout_seconds": 2, "max_hops": 20},
            "verification": {
                "enabled": True,
                "service_endpoints": [SERVICE_A, SERVICE_B],
                "sample_size": 2,
                "timeout_seconds": 1,
            },
            "retry_policy": {"max_attempts": 1, "backoff_seconds": 0},
        }
    )


@pytest.fixture
def make_probe(web: FakeWeb, config: Config):
    def _make() -> HttpProbe:
        return HttpProbe(config.probe, transport=web.transport)

    return _make
