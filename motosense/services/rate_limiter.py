"""Per-source request rate limiting.

Sliding window of ``max_requests`` per ``period_seconds``, tracked per
source ID. The window resets lazily: the first request after ``reset_at``
starts a new window, no background timer is involved. Sources without
limits configured are never throttled.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from motosense.config import get_settings
from motosense.models.base import utcnow
from motosense.repositories import RateLimitWindowRepository

logger = logging.getLogger(__name__)


@dataclass
class Window:
    request_count: int
    reset_at: datetime


class RateLimiter(ABC):
    """Decides whether a source may be fetched now."""

    @abstractmethod
    async def _load(self, source_id: str) -> Window | None:
        pass

    @abstractmethod
    async def _store(self, source_id: str, window: Window) -> None:
        pass

    async def allow(
        self,
        source_id: str,
        max_requests: int | None,
        period_seconds: int | None,
        now: datetime | None = None,
    ) -> bool:
        """Count a request against the source and report whether it is allowed."""
        if not max_requests or not period_seconds:
            return True

        now = now or utcnow()
        window = await self._load(source_id)
        if window is None or now >= window.reset_at:
            window = Window(request_count=0, reset_at=now + timedelta(seconds=period_seconds))

        if window.request_count >= max_requests:
            logger.warning(
                "Rate limit exceeded for %s: %d/%d until %s",
                source_id, window.request_count, max_requests, window.reset_at.isoformat(),
            )
            return False

        window.request_count += 1
        await self._store(source_id, window)
        logger.debug("Rate limit OK for %s: %d/%d", source_id, window.request_count, max_requests)
        return True

    async def retry_after(self, source_id: str, now: datetime | None = None) -> int:
        """Seconds until the source's window resets."""
        window = await self._load(source_id)
        if window is None:
            return 0
        remaining = (window.reset_at - (now or utcnow())).total_seconds()
        return int(remaining) + 1 if remaining > 0 else 0


class InMemoryRateLimiter(RateLimiter):
    """Process-local windows. Lost on restart."""

    def __init__(self):
        self._windows: dict[str, Window] = {}

    async def _load(self, source_id: str) -> Window | None:
        window = self._windows.get(source_id)
        if window is None:
            return None
        return Window(window.request_count, window.reset_at)

    async def _store(self, source_id: str, window: Window) -> None:
        self._windows[source_id] = window

    def reset(self) -> None:
        self._windows.clear()


class DatabaseRateLimiter(RateLimiter):
    """Windows persisted in ``rate_limit_windows``."""

    def __init__(self, session: AsyncSession):
        self.repo = RateLimitWindowRepository(session)

    async def _load(self, source_id: str) -> Window | None:
        row = await self.repo.get(source_id)
        if row is None:
            return None
        return Window(row.request_count, row.reset_at)

    async def _store(self, source_id: str, window: Window) -> None:
        await self.repo.save(source_id, window.request_count, window.reset_at)


memory_rate_limiter = InMemoryRateLimiter()


def get_rate_limiter(session: AsyncSession) -> RateLimiter:
    """Rate limiter for the configured backend."""
    if get_settings().rate_limiter_backend == "database":
        return DatabaseRateLimiter(session)
    return memory_rate_limiter
