"""Shared test fixtures."""

import sys
from pathlib import Path
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from motosense.database import Base
from motosense.models import Race, RaceStatus, Rider, Season

from tests.fixtures.factories import RIDER_IDS, create_race, create_rider, create_season, utc


@pytest.fixture
async def db_engine():
    """Create in-memory SQLite engine for tests."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        future=True,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create async session with transaction rollback."""
    async_session = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def test_riders(db_session: AsyncSession) -> list[Rider]:
    """Create the rider field."""
    riders = []
    for number, rider_id in enumerate(RIDER_IDS, 1):
        rider = create_rider(id=rider_id, number=number)
        db_session.add(rider)
        riders.append(rider)
    await db_session.flush()
    return riders


@pytest.fixture
async def test_season(db_session: AsyncSession) -> Season:
    """Create a simulation season."""
    season = create_season()
    db_session.add(season)
    await db_session.flush()
    return season


@pytest.fixture
async def simulation_races(db_session: AsyncSession, test_season: Season) -> list[Race]:
    """Three simulation rounds one week apart, all upcoming."""
    races = []
    for i, name in enumerate(["Anaheim 1", "San Diego", "Anaheim 2"], 1):
        race = create_race(
            id=f"demo-2025-r{i:02d}",
            name=name,
            round=i,
            race_date=utc(2025, 1, 4 + 7 * i),
            season_id=test_season.id,
            is_simulation=True,
        )
        db_session.add(race)
        races.append(race)
    await db_session.flush()
    return races


@pytest.fixture
async def live_race(db_session: AsyncSession) -> Race:
    """A live race far in the future."""
    race = create_race(
        id="sx-2030-r01",
        name="Anaheim 1",
        race_date=utc(2030, 1, 12),
        status=RaceStatus.UPCOMING.value,
    )
    db_session.add(race)
    await db_session.flush()
    return race
