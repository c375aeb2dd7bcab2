"""Business logic services."""

from motosense.services.achievement_service import ACHIEVEMENTS, AchievementService
from motosense.services.prediction_service import PredictionService
from motosense.services.rate_limiter import DatabaseRateLimiter, InMemoryRateLimiter, RateLimiter
from motosense.services.results_service import ResultsService
from motosense.services.round_service import RoundService, RoundTransition
from motosense.services.scoring import ScoreBreakdown, ScoringRules, score_prediction
from motosense.services.sync_service import (
    SYNC_KINDS,
    ResultSync,
    RiderSync,
    ScheduleSync,
    SyncOrchestrator,
    SyncResult,
    seed_sources,
)

__all__ = [
    "ACHIEVEMENTS",
    "AchievementService",
    "PredictionService",
    "ResultsService",
    "RoundService",
    "RoundTransition",
    "RateLimiter",
    "InMemoryRateLimiter",
    "DatabaseRateLimiter",
    "ScoreBreakdown",
    "ScoringRules",
    "score_prediction",
    "SyncOrchestrator",
    "ScheduleSync",
    "RiderSync",
    "ResultSync",
    "SyncResult",
    "SYNC_KINDS",
    "seed_sources",
]
