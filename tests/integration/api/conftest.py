"""Shared fixtures for API integration tests."""

from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from motosense.config import get_settings
from motosense.database import get_db
from motosense.main import app
from motosense.services.rate_limiter import memory_rate_limiter
from motosense.services.sync_service import seed_sources


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Rate limit windows are process-wide; start every test from zero."""
    memory_rate_limiter.reset()
    yield
    memory_rate_limiter.reset()


@pytest.fixture(scope="function")
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API tests."""
    # Create a dependency override that uses the test session
    async def get_test_db():
        yield db_session

    app.dependency_overrides[get_db] = get_test_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Clean up override
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Bearer header for admin endpoints."""
    return {"Authorization": f"Bearer {get_settings().sync_api_token}"}


@pytest.fixture
async def sources(db_session: AsyncSession) -> None:
    """Default data sources."""
    await seed_sources(db_session)
    await db_session.commit()
