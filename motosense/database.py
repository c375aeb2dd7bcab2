"""Database connection and session management."""

from collections.abc import AsyncGenerator
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from motosense.config import get_settings

settings = get_settings()


def async_database_url(database_url: str) -> str:
    """Async driver URL for a configured database URL.

    Plain ``sqlite`` URLs get the aiosqlite driver; anything else is used
    as configured.
    """
    url = make_url(database_url)
    if url.drivername != "sqlite":
        return database_url
    return url.set(drivername="sqlite+aiosqlite").render_as_string(hide_password=False)


async_engine = create_async_engine(
    async_database_url(settings.database_url),
    echo=settings.debug,
)

AsyncSessionLocal = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; commits on success, rolls back on any error."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create every MotoSense table that does not exist yet.

    A SQLite file database gets its parent directory created first.
    """
    url = async_engine.url
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
