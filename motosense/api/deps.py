"""Shared API dependencies."""

import secrets
from collections.abc import AsyncGenerator
from datetime import datetime, timezone

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from motosense.config import get_settings
from motosense.exceptions import AuthenticationError
from motosense.fetchers import DataFetcher, FixtureFetcher, HttpFetcher

bearer_scheme = HTTPBearer(auto_error=False)


async def require_sync_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> None:
    """Reject requests without the admin bearer token."""
    expected = get_settings().sync_api_token
    if credentials is None or not secrets.compare_digest(credentials.credentials, expected):
        raise AuthenticationError("Invalid or missing bearer token")


async def get_fetcher() -> AsyncGenerator[DataFetcher, None]:
    """Fetcher for the configured sync backend."""
    fetcher: DataFetcher = HttpFetcher() if get_settings().sync_fetcher == "http" else FixtureFetcher()
    async with fetcher:
        yield fetcher


def error_body(message: str, code: str) -> dict:
    """JSON body for error responses."""
    return {
        "error": message,
        "code": code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
