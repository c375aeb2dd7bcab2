"""Prediction score schemas."""

from datetime import datetime

from motosense.schemas.common import BaseSchema


class ScoreResponse(BaseSchema):
    """Score of one prediction."""

    prediction_id: int
    user_id: str
    race_id: str
    exact_matches: int
    top5_matches: int
    points: int
    bonus_points: int
    confidence_multiplier: float
    streak_multiplier: float
    streak_bonus: int
    total_points: int
    accuracy: float
    is_perfect: bool
    holeshot_correct: bool
    fastest_lap_correct: bool
    calculated_at: datetime
