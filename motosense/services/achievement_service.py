"""Achievements, streaks and profile aggregates."""

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from motosense.config import get_settings
from motosense.models import UserAchievement, UserProfile
from motosense.models.base import utcnow
from motosense.repositories import (
    PredictionRepository,
    ProfileRepository,
    ScoreRepository,
    UserAchievementRepository,
)

logger = logging.getLogger(__name__)

EARLY_BIRD_HOURS = 24


@dataclass(frozen=True)
class AchievementDefinition:
    """Catalog entry."""

    id: str
    type: str
    title: str
    description: str
    category: str
    tier: str
    target: int
    reward_points: int
    min_predictions: int = 0


ACHIEVEMENTS: tuple[AchievementDefinition, ...] = (
    # Predictions
    AchievementDefinition("first_prediction", "first_prediction", "First Blood",
                          "Make your first prediction", "predictions", "bronze", 1, 100),
    AchievementDefinition("predictions_5", "prediction_count", "Getting Started",
                          "Make 5 predictions", "predictions", "bronze", 5, 250),
    AchievementDefinition("predictions_10", "prediction_count", "Dedicated Fan",
                          "Make 10 predictions", "predictions", "silver", 10, 500),
    AchievementDefinition("predictions_25", "prediction_count", "Race Analyst",
                          "Make 25 predictions", "predictions", "gold", 25, 1000),
    AchievementDefinition("predictions_50", "prediction_count", "Prediction Master",
                          "Make 50 predictions", "predictions", "platinum", 50, 2500),
    # Accuracy
    AchievementDefinition("accuracy_50", "accuracy_threshold", "Sharp Eye",
                          "Achieve 50% accuracy (min 5 predictions)", "accuracy", "bronze", 50, 300, 5),
    AchievementDefinition("accuracy_70", "accuracy_threshold", "Track Reader",
                          "Achieve 70% accuracy (min 10 predictions)", "accuracy", "silver", 70, 750, 10),
    AchievementDefinition("accuracy_80", "accuracy_threshold", "Race Whisperer",
                          "Achieve 80% accuracy (min 15 predictions)", "accuracy", "gold", 80, 1500, 15),
    AchievementDefinition("perfect_prediction", "perfect_race", "Perfect Weekend",
                          "Predict all 5 positions correctly in a single race", "accuracy", "platinum", 1, 5000),
    # Streaks
    AchievementDefinition("streak_3", "streak_count", "On a Roll",
                          "Predict 3 races in a row", "streaks", "bronze", 3, 200),
    AchievementDefinition("streak_5", "streak_count", "Hot Streak",
                          "Predict 5 races in a row", "streaks", "silver", 5, 500),
    AchievementDefinition("streak_10", "streak_count", "Unstoppable",
                          "Predict 10 races in a row", "streaks", "gold", 10, 1200),
    AchievementDefinition("streak_20", "streak_count", "Legend Status",
                          "Predict 20 races in a row", "streaks", "platinum", 20, 3000),
    # Special
    AchievementDefinition("early_bird", "early_bird", "Early Bird",
                          "Make a prediction more than 24 hours before race", "special", "bronze", 1, 150),
    AchievementDefinition("track_specialist", "track_specialist", "Track Specialist",
                          "Make predictions for 3 races at the same track", "special", "silver", 3, 350),
)

ACHIEVEMENTS_BY_ID = {a.id: a for a in ACHIEVEMENTS}


@dataclass(frozen=True)
class StreakState:
    current: int = 0
    longest: int = 0
    last_race_date: datetime | None = None


def update_streak(state: StreakState, race_date: datetime, window_days: int = 14) -> StreakState:
    """Apply one new prediction to a streak.

    A race after the previous one and within ``window_days`` of it extends
    the streak. Anything else, including the same or an earlier race date,
    starts over at 1.
    """
    last = state.last_race_date
    if last is not None and timedelta(0) < race_date - last <= timedelta(days=window_days):
        current = state.current + 1
    else:
        current = 1

    return StreakState(current=current, longest=max(state.longest, current), last_race_date=race_date)


@dataclass(frozen=True)
class UserStats:
    """Inputs for achievement evaluation."""

    total_predictions: int = 0
    scored_predictions: int = 0
    perfect_predictions: int = 0
    accuracy: float = 0.0
    current_streak: int = 0
    longest_streak: int = 0
    early_predictions: int = 0
    max_track_predictions: int = 0
    prediction_points: int = 0
    last_race_date: datetime | None = None


@dataclass(frozen=True)
class AchievementProgress:
    achievement: AchievementDefinition
    progress: int
    is_met: bool


def _progress(achievement: AchievementDefinition, stats: UserStats) -> tuple[int, bool]:
    kind = achievement.type
    if kind in ("first_prediction", "prediction_count"):
        value = stats.total_predictions
    elif kind == "accuracy_threshold":
        if stats.scored_predictions < achievement.min_predictions:
            return int(stats.accuracy), False
        value = int(stats.accuracy)
    elif kind == "perfect_race":
        value = stats.perfect_predictions
    elif kind == "streak_count":
        value = stats.longest_streak
    elif kind == "early_bird":
        value = stats.early_predictions
    elif kind == "track_specialist":
        value = stats.max_track_predictions
    else:
        return 0, False
    return value, value >= achievement.target


def evaluate(
    stats: UserStats,
    catalog: tuple[AchievementDefinition, ...] = ACHIEVEMENTS,
) -> list[AchievementProgress]:
    """Progress of every catalog entry for the given stats."""
    results = []
    for achievement in catalog:
        value, met = _progress(achievement, stats)
        results.append(
            AchievementProgress(achievement=achievement, progress=min(value, achievement.target), is_met=met)
        )
    return results


class AchievementService:
    """Keeps profiles and achievement progress in step with predictions and scores.

    All aggregates are rebuilt from stored predictions and scores, so calling
    ``refresh_profile`` any number of times gives the same profile, and an
    achievement reward is only ever granted on its first unlock.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.profile_repo = ProfileRepository(session)
        self.achievement_repo = UserAchievementRepository(session)
        self.prediction_repo = PredictionRepository(session)
        self.score_repo = ScoreRepository(session)
        self.streak_window_days = get_settings().streak_window_days

    async def streaks_by_prediction(self, user_id: str) -> dict[int, int]:
        """Streak reached by each of a user's predictions, keyed by prediction ID."""
        streak = StreakState()
        streaks = {}
        for prediction, race in await self.prediction_repo.get_history(user_id):
            streak = update_streak(streak, race.date, self.streak_window_days)
            streaks[prediction.id] = streak.current
        return streaks

    async def collect_stats(self, user_id: str) -> UserStats:
        """Aggregate a user's predictions and scores."""
        history = await self.prediction_repo.get_history(user_id)
        scores = await self.score_repo.get_by_user(user_id)

        streak = StreakState()
        early = 0
        tracks: Counter[str] = Counter()
        for prediction, race in history:
            streak = update_streak(streak, race.date, self.streak_window_days)
            if prediction.submitted_at <= race.date - timedelta(hours=EARLY_BIRD_HOURS):
                early += 1
            if race.track_id:
                tracks[race.track_id] += 1

        accuracy = round(sum(s.accuracy for s in scores) / len(scores), 1) if scores else 0.0
        return UserStats(
            total_predictions=len(history),
            scored_predictions=len(scores),
            perfect_predictions=sum(1 for s in scores if s.is_perfect),
            accuracy=accuracy,
            current_streak=streak.current,
            longest_streak=streak.longest,
            early_predictions=early,
            max_track_predictions=max(tracks.values(), default=0),
            prediction_points=sum(s.total_points for s in scores),
            last_race_date=max((race.date for _, race in history), default=None),
        )

    async def apply(
        self, user_id: str, progress: list[AchievementProgress], now: datetime | None = None
    ) -> list[AchievementDefinition]:
        """Persist progress and unlock newly met achievements.

        Returns the achievements unlocked by this call.
        """
        now = now or utcnow()
        existing = await self.achievement_repo.get_by_user(user_id)
        unlocked = []

        for entry in progress:
            row = existing.get(entry.achievement.id)
            if row is None:
                if entry.progress == 0 and not entry.is_met:
                    continue
                row = UserAchievement(user_id=user_id, achievement_id=entry.achievement.id)
                self.session.add(row)

            if row.is_unlocked:
                continue

            row.progress = entry.progress
            if entry.is_met:
                row.is_unlocked = True
                row.unlocked_at = now
                row.points_awarded = entry.achievement.reward_points
                unlocked.append(entry.achievement)
                logger.info(
                    "User %s unlocked %s (+%d)",
                    user_id, entry.achievement.id, entry.achievement.reward_points,
                )

        await self.session.flush()
        return unlocked

    async def refresh_profile(self, user_id: str, now: datetime | None = None) -> UserProfile:
        """Recompute a user's profile and evaluate achievements."""
        profile = await self.profile_repo.get_or_create(user_id)
        stats = await self.collect_stats(user_id)

        profile.total_predictions = stats.total_predictions
        profile.scored_predictions = stats.scored_predictions
        profile.perfect_predictions = stats.perfect_predictions
        profile.accuracy = stats.accuracy
        profile.prediction_points = stats.prediction_points
        profile.current_streak = stats.current_streak
        profile.longest_streak = stats.longest_streak
        profile.last_prediction_race_date = stats.last_race_date

        await self.apply(user_id, evaluate(stats), now)

        achievements = await self.achievement_repo.get_by_user(user_id)
        profile.achievement_points = sum(a.points_awarded for a in achievements.values() if a.is_unlocked)
        profile.total_points = profile.prediction_points + profile.achievement_points

        await self.session.flush()
        return profile

    async def get_user_achievements(self, user_id: str) -> list[tuple[AchievementDefinition, UserAchievement | None]]:
        """Every catalog entry with the user's progress row, if any."""
        existing = await self.achievement_repo.get_by_user(user_id)
        return [(a, existing.get(a.id)) for a in ACHIEVEMENTS]
