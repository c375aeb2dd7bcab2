"""Prediction model."""

from datetime import datetime

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.dialects.sqlite import JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from motosense.database import Base
from motosense.models.base import TimestampMixin, UTCDateTime


class Prediction(Base, TimestampMixin):
    """Prediction table model (one per user and race)."""

    __tablename__ = "predictions"
    __table_args__ = (
        UniqueConstraint("user_id", "race_id", name="uq_predictions_user_race"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    race_id: Mapped[str] = mapped_column(String(50), ForeignKey("races.id"), nullable=False)
    picks: Mapped[list] = mapped_column(JSON, nullable=False)  # rider ids, index 0 = P1
    confidence_level: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    holeshot_rider_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    fastest_lap_rider_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    submitted_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    # Relationships
    race = relationship("Race", back_populates="predictions")
    score = relationship(
        "PredictionScore",
        back_populates="prediction",
        uselist=False,
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Prediction(id={self.id}, user_id='{self.user_id}', race_id='{self.race_id}')>"
