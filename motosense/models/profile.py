"""User profile and achievement progress models."""

from datetime import datetime

from sqlalchemy import Boolean, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from motosense.database import Base
from motosense.models.base import TimestampMixin, UTCDateTime


class UserProfile(Base, TimestampMixin):
    """Aggregate prediction counters per user."""

    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    username: Mapped[str | None] = mapped_column(String(50), nullable=True)

    total_predictions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    scored_predictions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    perfect_predictions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    prediction_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    achievement_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    accuracy: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)  # %

    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_prediction_race_date: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<UserProfile(user_id='{self.user_id}', total_points={self.total_points})>"


class UserAchievement(Base, TimestampMixin):
    """Per-user progress on one catalog achievement."""

    __tablename__ = "user_achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievements_user_achievement"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    achievement_id: Mapped[str] = mapped_column(String(50), nullable=False)
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_unlocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    unlocked_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    points_awarded: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<UserAchievement(user_id='{self.user_id}', achievement_id='{self.achievement_id}')>"
