"""Data sync bookkeeping models."""

import enum
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from motosense.database import Base
from motosense.models.base import TimestampMixin, UTCDateTime


class SyncStatus(str, enum.Enum):
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class ChangeType(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    RESCHEDULED = "rescheduled"


class Significance(str, enum.Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DataSource(Base, TimestampMixin):
    """External data source configuration."""

    __tablename__ = "data_sources"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    category: Mapped[str] = mapped_column(String(20), nullable=False)  # schedule/riders/results
    url: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    rate_limit_requests: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rate_limit_period: Mapped[int | None] = mapped_column(Integer, nullable=True)  # seconds
    last_successful_fetch: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    consecutive_failures: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<DataSource(id='{self.id}', name='{self.name}')>"


class ContentSnapshot(Base, TimestampMixin):
    """Last-seen content hash per source and URL."""

    __tablename__ = "content_snapshots"
    __table_args__ = (
        UniqueConstraint("source_id", "url", name="uq_content_snapshots_source_url"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source_id: Mapped[str] = mapped_column(String(50), ForeignKey("data_sources.id"), nullable=False)
    url: Mapped[str] = mapped_column(String(255), nullable=False)
    content_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    last_checked: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    last_changed: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    check_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    change_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class SyncHistory(Base, TimestampMixin):
    """One row per sync run."""

    __tablename__ = "sync_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source_id: Mapped[str] = mapped_column(String(50), ForeignKey("data_sources.id"), nullable=False, index=True)
    sync_type: Mapped[str] = mapped_column(String(20), nullable=False)  # scheduled/manual/triggered
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=SyncStatus.RUNNING.value)
    started_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    duration_ms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    records_fetched: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    records_inserted: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    records_updated: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    records_deleted: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    records_invalid: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    changes = relationship("DataChange", back_populates="sync", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<SyncHistory(id={self.id}, source_id='{self.source_id}', status={self.status})>"


class DataChange(Base, TimestampMixin):
    """Append-only audit record of a detected change."""

    __tablename__ = "data_changes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sync_history_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("sync_history.id"), nullable=True, index=True
    )
    entity_type: Mapped[str] = mapped_column(String(20), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(120), nullable=False)
    change_type: Mapped[str] = mapped_column(String(20), nullable=False)
    field_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    significance: Mapped[str] = mapped_column(String(10), nullable=False, default=Significance.LOW.value)

    # Relationships
    sync = relationship("SyncHistory", back_populates="changes")


class RateLimitWindow(Base):
    """Persisted request counter per source."""

    __tablename__ = "rate_limit_windows"

    source_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    request_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reset_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
