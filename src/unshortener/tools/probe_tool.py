"""Probe tool - single HTTP request without following redirects."""

import logging
from dataclasses import dataclass

import httpx

from ..config.loader import ProbeConfig

logger = logging.getLogger(__name__)

REDIRECT_CODES = (301, 302)


@dataclass
class ProbeResult:
    """Result from one probe. status_code is 0 when the request failed."""

    url: str
    status_code: int
    header_block: str
    body: str
    error: str | None = None

    @property
    def is_redirect(self) -> bool:
        return self.status_code in REDIRECT_CODES


def format_header_block(response: httpx.Response) -> str:
    """Render status line and headers the way they appeared on the wire."""
    lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}".rstrip()]
    for name, value in response.headers.raw:
        lines.append(f"{name.decode('latin-1')}: {value.decode('latin-1')}")
    return "\r\n".join(lines)


class HttpProbe:
    """
    Issues one GET per call and never follows redirects, so the caller
    sees every hop's status and headers.
    Transport failures are reported in ProbeResult.error, not raised.
    """

    def __init__(
        self,
        config: ProbeConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or ProbeConfig()
        self.client = httpx.AsyncClient(
            timeout=self.config.timeout_seconds,
            follow_redirects=False,
            trust_env=False,
            headers={"User-Agent": self.config.user_agent},
            transport=transport,
        )

    async def __aenter__(self) -> "HttpProbe":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def probe(
        self,
        url: str,
        include_headers: bool = True,
        timeout: float | None = None,
    ) -> ProbeResult:
        """
        Probe url once.
        With include_headers the header block is captured and the body is
        never downloaded; without it only the body is read.
        """
        kwargs = {} if timeout is None else {"timeout": timeout}
        try:
            async with self.client.stream("GET", url, **kwargs) as response:
                if include_headers:
                    header_block, body = format_header_block(response), ""
                else:
                    await response.aread()
                    header_block, body = "", response.text
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Probe failed for %s: %s", url, e)
            return ProbeResult(url=url, status_code=0, header_block="", body="", error=str(e) or type(e).__name__)

        logger.debug("Probe %s -> %s", url, response.status_code)
        return ProbeResult(
            url=url,
            status_code=response.status_code,
            header_block=header_block,
            body=body,
        )
