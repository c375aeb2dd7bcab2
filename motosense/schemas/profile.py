"""Profile, achievement and leaderboard schemas."""

from datetime import datetime

from motosense.schemas.common import BaseSchema


class ProfileResponse(BaseSchema):
    """User profile aggregates."""

    user_id: str
    username: str | None = None
    total_predictions: int
    scored_predictions: int
    perfect_predictions: int
    prediction_points: int
    achievement_points: int
    total_points: int
    accuracy: float
    current_streak: int
    longest_streak: int
    last_prediction_race_date: datetime | None = None


class AchievementResponse(BaseSchema):
    """Catalog entry with the user's progress."""

    id: str
    title: str
    description: str
    category: str
    tier: str
    target: int
    reward_points: int
    progress: int = 0
    is_unlocked: bool = False
    unlocked_at: datetime | None = None


class LeaderboardEntry(BaseSchema):
    """One leaderboard row."""

    rank: int
    user_id: str
    username: str | None = None
    total_points: int
    accuracy: float
    total_predictions: int
    perfect_predictions: int
