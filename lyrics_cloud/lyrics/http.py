"""
Async HTTP fetchers used by the lyrics providers

Providers never touch aiohttp directly. They receive a fetcher exposing
`get_json` and `get_text`, which makes the direct path and the forwarding
proxy path interchangeable and lets tests substitute canned responses.

Transport failures surface as NetworkError, HTTP error statuses as
UpstreamStatusError carrying the status code.
"""

import asyncio
import json
from typing import Optional, Dict, Any
from urllib.parse import quote

import aiohttp
from asyncio_throttle import Throttler
from yarl import URL

from ..core.exceptions import NetworkError, UpstreamStatusError
from ..utils.logger import get_logger


class HttpFetcher:
    """
    Direct fetcher over a shared aiohttp session

    Every request goes through an asyncio-throttle Throttler so one process
    never hammers a provider faster than `min_request_interval`. No timeout is
    applied here: callers that need bounded latency wrap the whole lookup in
    their own deadline.
    """

    name = "direct"

    def __init__(
        self,
        session: aiohttp.ClientSession,
        user_agent: str,
        min_request_interval: float = 1.0
    ):
        self.session = session
        self.headers = {'User-Agent': user_agent}
        self.throttler = Throttler(rate_limit=1, period=max(min_request_interval, 0.001))
        self.logger = get_logger(__name__)

    def build_url(self, url: str, params: Optional[Dict[str, str]] = None) -> str:
        """Absolute URL including encoded query parameters"""
        target = URL(url)
        if params:
            target = target.update_query(params)
        return str(target)

    async def _request(self, url: str, params: Optional[Dict[str, str]] = None) -> str:
        target = self.build_url(url, params)
        self.logger.debug(f"GET {target} via {self.name}")

        try:
            async with self.throttler:
                async with self.session.get(URL(target, encoded=True), headers=self.headers) as response:
                    body = await response.text(errors='replace')
                    if response.status >= 400:
                        raise UpstreamStatusError(
                            f"{target} answered HTTP {response.status}",
                            status=response.status,
                            details={'url': target}
                        )
                    return body
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(
                f"Request to {target} failed: {str(e) or type(e).__name__}",
                details={'url': target, 'original_error': repr(e)}
            ) from e

    async def get_text(self, url: str, params: Optional[Dict[str, str]] = None) -> str:
        """Fetch a page body as text"""
        return await self._request(url, params)

    async def get_json(self, url: str, params: Optional[Dict[str, str]] = None) -> Any:
        """Fetch and decode a JSON document"""
        body = await self._request(url, params)
        try:
            return json.loads(body)
        except ValueError as e:
            raise NetworkError(f"Malformed JSON from {url}", details={'url': url}) from e


class ProxiedFetcher(HttpFetcher):
    """
    Fetcher that routes every request through a neutral forwarding proxy

    The proxy receives the complete target URL, percent-encoded, appended to
    its own prefix (e.g. `https://corsproxy.io/?<encoded target>`).
    """

    name = "proxy"

    def __init__(
        self,
        session: aiohttp.ClientSession,
        user_agent: str,
        proxy_url: str,
        min_request_interval: float = 1.0
    ):
        super().__init__(session, user_agent, min_request_interval)
        self.proxy_url = proxy_url

    def build_url(self, url: str, params: Optional[Dict[str, str]] = None) -> str:
        target = super().build_url(url, params)
        return f"{self.proxy_url}{quote(target, safe='')}"
