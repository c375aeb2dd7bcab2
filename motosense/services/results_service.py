"""Race results entry and score calculation."""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from motosense.exceptions import NotFoundError, ValidationError
from motosense.fetchers.payloads import RaceResultItem
from motosense.models import PredictionScore, Race, RaceResult, RaceStatus, UserProfile
from motosense.models.base import utcnow
from motosense.repositories import (
    PredictionRepository,
    ProfileRepository,
    RaceRepository,
    ResultRepository,
    RiderRepository,
    ScoreRepository,
)
from motosense.services.achievement_service import AchievementService
from motosense.services.scoring import PICK_COUNT, ScoringRules, score_prediction

logger = logging.getLogger(__name__)


class ResultsService:
    """Service for race results and the scores derived from them."""

    def __init__(self, session: AsyncSession, rules: ScoringRules | None = None):
        self.session = session
        self.rules = rules or ScoringRules.from_settings()
        self.race_repo = RaceRepository(session)
        self.rider_repo = RiderRepository(session)
        self.result_repo = ResultRepository(session)
        self.prediction_repo = PredictionRepository(session)
        self.score_repo = ScoreRepository(session)
        self.profile_repo = ProfileRepository(session)
        self.achievements = AchievementService(session)

    async def _get_race(self, race_id: str) -> Race:
        race = await self.race_repo.get(race_id)
        if race is None:
            raise NotFoundError("Race", race_id)
        return race

    async def enter_results(
        self,
        race_id: str,
        entries: list[RaceResultItem],
        holeshot_rider_id: str | None = None,
        fastest_lap_rider_id: str | None = None,
        now: datetime | None = None,
    ) -> list[PredictionScore]:
        """Replace a race's finishing order and score every prediction on it."""
        race = await self._get_race(race_id)

        if len(entries) < PICK_COUNT:
            raise ValidationError(f"At least {PICK_COUNT} finishing positions are required", entity_id=race_id)
        rider_ids = [e.rider_id for e in entries]
        if len(set(rider_ids)) != len(rider_ids):
            raise ValidationError("A rider can only appear once in the results", entity_id=race_id)
        positions = [e.position for e in entries]
        if len(set(positions)) != len(positions) or min(positions) < 1:
            raise ValidationError("Positions must be unique and start at 1", entity_id=race_id)

        known = await self.rider_repo.get_many(
            rider_ids + [r for r in (holeshot_rider_id, fastest_lap_rider_id) if r]
        )
        for rider_id in (*rider_ids, holeshot_rider_id, fastest_lap_rider_id):
            if rider_id and rider_id not in known:
                raise NotFoundError("Rider", rider_id)

        await self.result_repo.delete_by_race(race_id)
        for entry in sorted(entries, key=lambda e: e.position):
            self.session.add(
                RaceResult(
                    race_id=race_id,
                    rider_id=entry.rider_id,
                    position=entry.position,
                    points=entry.points or 0,
                    laps=entry.laps,
                    status=entry.status or "finished",
                    total_time=entry.total_time,
                    best_lap_time=entry.best_lap_time,
                    gap=entry.gap,
                )
            )

        race.holeshot_rider_id = holeshot_rider_id
        race.fastest_lap_rider_id = fastest_lap_rider_id
        score_now = self.mark_results_posted(race)
        await self.session.flush()

        logger.info("Entered %d results for race %s", len(entries), race_id)
        if not score_now:
            return []
        return await self.recalculate_race_scores(race_id, now=now)

    @staticmethod
    def mark_results_posted(race: Race) -> bool:
        """Flag a race as having results and report whether it can be scored now.

        Live races complete with their results. A simulation race keeps its
        round status and is only scored once the round has been closed.
        """
        race.has_results = True
        if not race.is_simulation:
            race.status = RaceStatus.COMPLETED.value
        return race.status == RaceStatus.COMPLETED.value

    async def delete_results(self, race_id: str) -> int:
        """Remove a race's results and every score derived from them."""
        race = await self._get_race(race_id)

        deleted = await self.result_repo.delete_by_race(race_id)
        affected_users = await self.score_repo.delete_by_race(race_id)

        race.has_results = False
        race.holeshot_rider_id = None
        race.fastest_lap_rider_id = None
        if not race.is_simulation and race.status == RaceStatus.COMPLETED.value:
            race.status = RaceStatus.UPCOMING.value
        await self.session.flush()

        for user_id in affected_users:
            await self.achievements.refresh_profile(user_id)

        logger.info("Deleted %d results for race %s (%d profiles refreshed)", deleted, race_id, len(affected_users))
        return deleted

    async def recalculate_race_scores(self, race_id: str, now: datetime | None = None) -> list[PredictionScore]:
        """Score every prediction on a race and refresh the affected profiles.

        Running it again with unchanged results leaves scores and profiles
        unchanged.
        """
        race = await self._get_race(race_id)
        finishing_order = await self.result_repo.get_finishing_order(race_id)
        if not finishing_order:
            logger.info("Race %s has no results yet, nothing to score", race_id)
            return []

        now = now or utcnow()
        scores = []
        for prediction in await self.prediction_repo.get_by_race(race_id):
            streaks = await self.achievements.streaks_by_prediction(prediction.user_id)
            try:
                breakdown = score_prediction(
                    prediction.picks,
                    finishing_order,
                    rules=self.rules,
                    confidence_level=prediction.confidence_level,
                    holeshot_pick=prediction.holeshot_rider_id,
                    fastest_lap_pick=prediction.fastest_lap_rider_id,
                    holeshot_winner=race.holeshot_rider_id,
                    fastest_lap_winner=race.fastest_lap_rider_id,
                    streak=streaks.get(prediction.id, 0),
                )
            except ValidationError as e:
                logger.warning("Skipping malformed prediction %s: %s", prediction.id, e.message)
                continue

            score = await self.score_repo.get_by_prediction(prediction.id)
            if score is None:
                score = PredictionScore(prediction_id=prediction.id, user_id=prediction.user_id, race_id=race_id)
                self.session.add(score)

            score.exact_matches = breakdown.exact_matches
            score.top5_matches = breakdown.top5_matches
            score.points = breakdown.points
            score.bonus_points = breakdown.bonus_points
            score.confidence_multiplier = breakdown.confidence_multiplier
            score.streak_multiplier = breakdown.streak_multiplier
            score.streak_bonus = breakdown.streak_bonus
            score.total_points = breakdown.total_points
            score.accuracy = breakdown.accuracy
            score.is_perfect = breakdown.is_perfect
            score.holeshot_correct = breakdown.holeshot_correct
            score.fastest_lap_correct = breakdown.fastest_lap_correct
            score.calculated_at = now
            scores.append(score)

        await self.session.flush()

        for user_id in sorted({s.user_id for s in scores}):
            await self.achievements.refresh_profile(user_id, now=now)

        logger.info("Scored %d predictions for race %s", len(scores), race_id)
        return scores

    async def get_results(self, race_id: str) -> list[RaceResult]:
        await self._get_race(race_id)
        return await self.result_repo.get_by_race(race_id)

    async def get_leaderboard(self, limit: int = 50) -> list[UserProfile]:
        """Profiles ordered by total points."""
        return await self.profile_repo.get_leaderboard(limit)
