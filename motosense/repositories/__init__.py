"""Data access repositories."""

from motosense.repositories.base import BaseRepository
from motosense.repositories.prediction_repository import PredictionRepository
from motosense.repositories.profile_repository import ProfileRepository, UserAchievementRepository
from motosense.repositories.race_repository import RaceRepository
from motosense.repositories.result_repository import ResultRepository
from motosense.repositories.rider_repository import RiderRepository
from motosense.repositories.score_repository import ScoreRepository
from motosense.repositories.sync_repository import (
    ContentSnapshotRepository,
    DataChangeRepository,
    DataSourceRepository,
    RateLimitWindowRepository,
    SyncHistoryRepository,
)

__all__ = [
    "BaseRepository",
    "RaceRepository",
    "RiderRepository",
    "PredictionRepository",
    "ResultRepository",
    "ScoreRepository",
    "DataSourceRepository",
    "ContentSnapshotRepository",
    "SyncHistoryRepository",
    "DataChangeRepository",
    "RateLimitWindowRepository",
    "ProfileRepository",
    "UserAchievementRepository",
]
