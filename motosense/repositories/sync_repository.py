"""Repositories for sync bookkeeping tables."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from motosense.models import (
    ContentSnapshot,
    DataChange,
    DataSource,
    RateLimitWindow,
    SyncHistory,
    SyncStatus,
)
from motosense.repositories.base import BaseRepository


class DataSourceRepository(BaseRepository[DataSource]):
    """Repository for DataSource model."""

    def __init__(self, session: AsyncSession):
        super().__init__(DataSource, session)

    async def get_by_name(self, name: str) -> DataSource | None:
        """Get a source by its unique name."""
        result = await self.session.execute(select(DataSource).where(DataSource.name == name))
        return result.scalar_one_or_none()

    async def record_outcome(self, source: DataSource, success: bool, at: datetime) -> None:
        """Track source health after a run."""
        if success:
            source.last_successful_fetch = at
            source.consecutive_failures = 0
        else:
            source.consecutive_failures = (source.consecutive_failures or 0) + 1
        await self.session.flush()


class ContentSnapshotRepository(BaseRepository[ContentSnapshot]):
    """Last-seen content hash per (source, url)."""

    def __init__(self, session: AsyncSession):
        super().__init__(ContentSnapshot, session)

    async def get_snapshot(self, source_id: str, url: str) -> ContentSnapshot | None:
        result = await self.session.execute(
            select(ContentSnapshot).where(
                ContentSnapshot.source_id == source_id,
                ContentSnapshot.url == url,
            )
        )
        return result.scalar_one_or_none()

    async def record(self, source_id: str, url: str, content_hash: str, at: datetime) -> bool:
        """Store the hash and report whether it differs from the previous one.

        The first hash seen for a (source, url) pair always counts as a change.
        """
        snapshot = await self.get_snapshot(source_id, url)
        if snapshot is None:
            self.session.add(
                ContentSnapshot(
                    source_id=source_id,
                    url=url,
                    content_hash=content_hash,
                    last_checked=at,
                    last_changed=at,
                    check_count=1,
                    change_count=0,
                )
            )
            await self.session.flush()
            return True

        changed = snapshot.content_hash != content_hash
        snapshot.last_checked = at
        snapshot.check_count += 1
        if changed:
            snapshot.content_hash = content_hash
            snapshot.last_changed = at
            snapshot.change_count += 1
        await self.session.flush()
        return changed


class SyncHistoryRepository(BaseRepository[SyncHistory]):
    """Repository for SyncHistory model."""

    def __init__(self, session: AsyncSession):
        super().__init__(SyncHistory, session)

    async def start(self, source_id: str, sync_type: str, at: datetime) -> SyncHistory:
        """Open a run record."""
        return await self.create({
            "source_id": source_id,
            "sync_type": sync_type,
            "status": SyncStatus.RUNNING.value,
            "started_at": at,
        })

    async def get_recent(self, source_id: str | None = None, limit: int = 20) -> list[SyncHistory]:
        """Latest runs first."""
        query = select(SyncHistory)
        if source_id:
            query = query.where(SyncHistory.source_id == source_id)
        result = await self.session.execute(
            query.order_by(SyncHistory.started_at.desc(), SyncHistory.id.desc()).limit(limit)
        )
        return list(result.scalars().all())


class DataChangeRepository(BaseRepository[DataChange]):
    """Append-only change log."""

    def __init__(self, session: AsyncSession):
        super().__init__(DataChange, session)

    async def add_many(self, sync_history_id: int | None, changes: list) -> int:
        """Insert change records for a run."""
        for change in changes:
            self.session.add(
                DataChange(
                    sync_history_id=sync_history_id,
                    entity_type=change.entity_type,
                    entity_id=change.entity_id,
                    change_type=change.change_type,
                    field_name=change.field_name,
                    old_value=change.old_value,
                    new_value=change.new_value,
                    significance=change.significance,
                )
            )
        await self.session.flush()
        return len(changes)

    async def get_by_sync(self, sync_history_id: int) -> list[DataChange]:
        result = await self.session.execute(
            select(DataChange)
            .where(DataChange.sync_history_id == sync_history_id)
            .order_by(DataChange.id)
        )
        return list(result.scalars().all())

    async def get_by_entity(self, entity_type: str, entity_id: str) -> list[DataChange]:
        result = await self.session.execute(
            select(DataChange)
            .where(DataChange.entity_type == entity_type, DataChange.entity_id == entity_id)
            .order_by(DataChange.id)
        )
        return list(result.scalars().all())


class RateLimitWindowRepository:
    """Persisted per-source request windows."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, source_id: str) -> RateLimitWindow | None:
        return await self.session.get(RateLimitWindow, source_id)

    async def save(self, source_id: str, request_count: int, reset_at: datetime) -> RateLimitWindow:
        window = await self.get(source_id)
        if window is None:
            window = RateLimitWindow(source_id=source_id, request_count=request_count, reset_at=reset_at)
            self.session.add(window)
        else:
            window.request_count = request_count
            window.reset_at = reset_at
        await self.session.flush()
        return window
