"""SQLAlchemy models."""

from motosense.models.prediction import Prediction
from motosense.models.profile import UserAchievement, UserProfile
from motosense.models.race import Race, RaceStatus, Series
from motosense.models.result import RaceResult, ResultStatus
from motosense.models.rider import Rider, RiderStatus
from motosense.models.score import PredictionScore
from motosense.models.season import Season
from motosense.models.sync import (
    ChangeType,
    ContentSnapshot,
    DataChange,
    DataSource,
    RateLimitWindow,
    Significance,
    SyncHistory,
    SyncStatus,
)

__all__ = [
    "Season",
    "Race",
    "RaceStatus",
    "Series",
    "Rider",
    "RiderStatus",
    "Prediction",
    "RaceResult",
    "ResultStatus",
    "PredictionScore",
    "DataSource",
    "ContentSnapshot",
    "SyncHistory",
    "DataChange",
    "RateLimitWindow",
    "ChangeType",
    "Significance",
    "SyncStatus",
    "UserProfile",
    "UserAchievement",
]
