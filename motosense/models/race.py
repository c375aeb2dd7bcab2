"""Race model."""

import enum
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from motosense.database import Base
from motosense.models.base import TimestampMixin, UTCDateTime


class RaceStatus(str, enum.Enum):
    """Race lifecycle status."""

    UPCOMING = "upcoming"
    OPEN = "open"  # accepting predictions (round-gated seasons)
    COMPLETED = "completed"


class Series(str, enum.Enum):
    """Race series."""

    SUPERCROSS = "supercross"
    MOTOCROSS = "motocross"
    CHAMPIONSHIP = "championship"


class Race(Base, TimestampMixin):
    """Race table model."""

    __tablename__ = "races"
    __table_args__ = (
        Index("ix_races_season_status", "season_id", "status"),
    )

    id: Mapped[str] = mapped_column(String(50), primary_key=True)  # e.g. sx-2025-r01
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    series: Mapped[str] = mapped_column(String(20), nullable=False)
    round: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, index=True)
    venue: Mapped[str | None] = mapped_column(String(100), nullable=True)
    track_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    season_id: Mapped[str | None] = mapped_column(String(50), ForeignKey("seasons.id"), nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default=RaceStatus.UPCOMING.value)
    is_simulation: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_results: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Round progression
    opened_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    closes_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    results_revealed_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    auto_progress_hours: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Expanded results
    holeshot_rider_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    fastest_lap_rider_id: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Relationships
    season = relationship("Season", back_populates="races")
    results = relationship("RaceResult", back_populates="race", cascade="all, delete-orphan")
    predictions = relationship("Prediction", back_populates="race", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Race(id='{self.id}', name='{self.name}', status={self.status})>"
