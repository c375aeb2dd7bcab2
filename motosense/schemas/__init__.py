"""Pydantic schemas."""

from motosense.schemas.common import (
    BaseSchema,
    RaceStatusEnum,
    ResultStatusEnum,
    SeriesEnum,
    SyncKindEnum,
    TimestampSchema,
)
from motosense.schemas.prediction import (
    PredictionCreate,
    PredictionHistoryListResponse,
    PredictionHistoryResponse,
    PredictionResponse,
)
from motosense.schemas.profile import AchievementResponse, LeaderboardEntry, ProfileResponse
from motosense.schemas.race import RaceDetailResponse, RaceListResponse, RaceResponse
from motosense.schemas.result import ResultEntry, ResultResponse, ResultsCreate, ResultsEntryResponse
from motosense.schemas.rider import RiderResponse
from motosense.schemas.round import CurrentRoundResponse, RoundTransitionResponse
from motosense.schemas.score import ScoreResponse
from motosense.schemas.sync import (
    DataChangeResponse,
    ErrorResponse,
    SyncEnvelope,
    SyncHistoryResponse,
    SyncResultResponse,
)

__all__ = [
    # Common
    "BaseSchema",
    "TimestampSchema",
    "RaceStatusEnum",
    "SeriesEnum",
    "ResultStatusEnum",
    "SyncKindEnum",
    # Race
    "RaceResponse",
    "RaceListResponse",
    "RaceDetailResponse",
    # Rider
    "RiderResponse",
    # Result
    "ResultEntry",
    "ResultsCreate",
    "ResultResponse",
    "ResultsEntryResponse",
    # Prediction
    "PredictionCreate",
    "PredictionResponse",
    "PredictionHistoryResponse",
    "PredictionHistoryListResponse",
    "ScoreResponse",
    # Rounds
    "RoundTransitionResponse",
    "CurrentRoundResponse",
    # Sync
    "DataChangeResponse",
    "SyncResultResponse",
    "SyncEnvelope",
    "SyncHistoryResponse",
    "ErrorResponse",
    # Profile
    "ProfileResponse",
    "AchievementResponse",
    "LeaderboardEntry",
]
