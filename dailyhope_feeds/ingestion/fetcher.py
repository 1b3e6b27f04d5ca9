"""Async feed fetcher with retries on transport errors."""

import asyncio
import time
from typing import Optional

import aiohttp
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential
import structlog

from .interfaces import FetcherInterface
from ..config.settings import settings
from ..errors import UpstreamFetchError

logger = structlog.get_logger()

_TRANSIENT_ERRORS = (aiohttp.ClientConnectionError, asyncio.TimeoutError)


class FeedFetcher(FetcherInterface):
    """Fetches raw RSS/XML bodies over HTTP.

    Connection failures and timeouts are retried; an HTTP response of any
    status ends the attempt, so a non-2xx is reported after a single GET.
    """

    def __init__(
        self,
        timeout_seconds: float = None,
        max_attempts: int = None,
        user_agent: str = None,
    ):
        self.timeout_seconds = timeout_seconds or settings.fetch_timeout_seconds
        self.max_attempts = max_attempts or settings.fetch_max_attempts
        self.user_agent = user_agent or settings.user_agent
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self._get_session()
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "application/rss+xml, application/xml, text/xml, */*",
                },
            )
        return self.session

    async def close(self):
        """Close HTTP session."""
        if self.session and not self.session.closed:
            await self.session.close()

    async def fetch_text(self, url: str) -> str:
        """GET `url` and return the body. Raises UpstreamFetchError."""
        start_time = time.time()
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception_type(_TRANSIENT_ERRORS),
                reraise=True,
            ):
                with attempt:
                    body = await self._get(url)
        except UpstreamFetchError as e:
            logger.error("feed_fetch_failed", url=url, status=e.status, error=str(e))
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            reason = str(e) or type(e).__name__
            logger.error("feed_fetch_failed", url=url, error=reason)
            raise UpstreamFetchError(url, reason=reason) from e

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.info("feed_fetched", url=url, length=len(body), time_ms=elapsed_ms)
        return body

    async def _get(self, url: str) -> str:
        session = await self._get_session()
        async with session.get(url) as response:
            if not 200 <= response.status < 300:
                raise UpstreamFetchError(url, status=response.status)
            return await response.text(errors="replace")
