"""Prediction score model."""

from datetime import datetime

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from motosense.database import Base
from motosense.models.base import TimestampMixin, UTCDateTime


class PredictionScore(Base, TimestampMixin):
    """Derived score for one prediction against its race results."""

    __tablename__ = "prediction_scores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    prediction_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("predictions.id"), nullable=False, unique=True
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    race_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    exact_matches: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    top5_matches: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bonus_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    confidence_multiplier: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    streak_multiplier: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    streak_bonus: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    accuracy: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    is_perfect: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    holeshot_correct: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    fastest_lap_correct: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    calculated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    # Relationships
    prediction = relationship("Prediction", back_populates="score")

    def __repr__(self) -> str:
        return f"<PredictionScore(prediction_id={self.prediction_id}, total_points={self.total_points})>"
