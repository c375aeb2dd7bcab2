"""Tests for database URL handling and schema creation."""

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine

import motosense.models  # noqa: F401
from motosense import database
from motosense.database import async_database_url


class TestAsyncDatabaseUrl:
    def test_plain_sqlite_gets_aiosqlite(self):
        assert async_database_url("sqlite:///./data/motosense.db") == "sqlite+aiosqlite:///./data/motosense.db"

    def test_in_memory_sqlite(self):
        assert async_database_url("sqlite://") == "sqlite+aiosqlite://"

    def test_explicit_driver_is_kept(self):
        assert async_database_url("sqlite+aiosqlite:///motosense.db") == "sqlite+aiosqlite:///motosense.db"

    def test_other_backends_are_kept(self):
        url = "postgresql+asyncpg://moto:secret@db:5432/motosense"
        assert async_database_url(url) == url


class TestInitDb:
    @pytest.mark.asyncio
    async def test_creates_missing_directory_and_tables(self, tmp_path, monkeypatch):
        path = tmp_path / "data" / "motosense.db"
        engine = create_async_engine(f"sqlite+aiosqlite:///{path}")
        monkeypatch.setattr(database, "async_engine", engine)

        await database.init_db()

        async with engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        await engine.dispose()
        assert path.exists()
        assert {"races", "predictions", "prediction_scores", "sync_history"} <= set(tables)
