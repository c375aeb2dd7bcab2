"""Base data fetcher."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

import httpx

from motosense.config import get_settings
from motosense.exceptions import SyncFetchError

logger = logging.getLogger(__name__)

settings = get_settings()


class DataFetcher(ABC):
    """Base class for external data fetchers.

    A fetcher turns a source URL into the raw payload text. Parsing and
    validation happen downstream, so a fetcher can be swapped without
    touching the sync orchestration.
    """

    async def close(self):
        """Release any held resources."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @abstractmethod
    async def fetch(self, url: str) -> str:
        """Fetch the raw payload for ``url``."""
        pass


class HttpFetcher(DataFetcher):
    """Fetcher doing a GET with bounded retries and exponential backoff.

    Retries 5xx, 429, timeouts and transport errors. Any other 4xx fails
    immediately. The delay before retry ``n`` (0-based) is
    ``retry_delay * 2 ** n``.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        timeout: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.timeout = timeout if timeout is not None else settings.fetch_timeout
        self.max_retries = max(1, max_retries if max_retries is not None else settings.fetch_max_retries)
        self.retry_delay = retry_delay if retry_delay is not None else settings.fetch_retry_delay
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            headers={"User-Agent": settings.user_agent},
            timeout=self.timeout,
            follow_redirects=True,
        )
        self._sleep = sleep

    async def close(self):
        """Close the HTTP client."""
        if self._owns_client:
            await self.client.aclose()

    async def fetch(self, url: str) -> str:
        last_error = "no attempt made"

        for attempt in range(self.max_retries):
            try:
                response = await self.client.get(
                    url,
                    headers={"User-Agent": settings.user_agent},
                    timeout=self.timeout,
                )
            except httpx.TimeoutException:
                last_error = f"timed out after {self.timeout}s"
            except httpx.TransportError as e:
                last_error = f"{type(e).__name__}: {e}"
            else:
                if response.is_success:
                    return response.text

                status = response.status_code
                last_error = f"HTTP {status}"
                if 400 <= status < 500 and status != 429:
                    raise SyncFetchError(url, last_error, attempts=attempt + 1)

            if attempt < self.max_retries - 1:
                backoff = self.retry_delay * (2 ** attempt)
                logger.info(
                    "Fetch %s failed (%s). Retry %d/%d after %.2fs",
                    url, last_error, attempt + 1, self.max_retries, backoff,
                )
                await self._sleep(backoff)

        raise SyncFetchError(url, last_error, attempts=self.max_retries)
