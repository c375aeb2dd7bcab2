"""Prediction schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from motosense.schemas.common import BaseSchema
from motosense.schemas.score import ScoreResponse


class PredictionCreate(BaseSchema):
    """Schema for submitting a prediction."""

    user_id: str = Field(..., min_length=1, max_length=64)
    race_id: str = Field(..., min_length=1, max_length=50)
    picks: list[str] = Field(..., min_length=5, max_length=5, description="Rider IDs, P1 first")
    confidence_level: int = Field(3, ge=1, le=5)
    holeshot_rider_id: str | None = None
    fastest_lap_rider_id: str | None = None

    @field_validator("picks")
    @classmethod
    def picks_unique(cls, v: list[str]) -> list[str]:
        if len(set(v)) != len(v):
            raise ValueError("A rider can only be picked once per prediction")
        return v


class PredictionResponse(BaseSchema):
    """Prediction response schema."""

    id: int
    user_id: str
    race_id: str
    picks: list[str]
    confidence_level: int
    holeshot_rider_id: str | None = None
    fastest_lap_rider_id: str | None = None
    submitted_at: datetime


class PredictionHistoryResponse(PredictionResponse):
    """Prediction with its race and score, for a user's history."""

    race_name: str
    race_date: datetime
    score: ScoreResponse | None = None


class PredictionHistoryListResponse(BaseSchema):
    """A user's predictions."""

    items: list[PredictionHistoryResponse]
    total: int
