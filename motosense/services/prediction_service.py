"""Prediction submission and lookup."""

import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from motosense.config import get_settings
from motosense.exceptions import DuplicatePrediction, NotFoundError, PredictionLocked
from motosense.models import Prediction, PredictionScore, Race, RaceStatus
from motosense.models.base import utcnow
from motosense.repositories import (
    PredictionRepository,
    RaceRepository,
    RiderRepository,
    ScoreRepository,
)
from motosense.services.achievement_service import AchievementService
from motosense.services.scoring import validate_confidence, validate_picks

logger = logging.getLogger(__name__)


class PredictionService:
    """Service for user predictions."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.race_repo = RaceRepository(session)
        self.rider_repo = RiderRepository(session)
        self.prediction_repo = PredictionRepository(session)
        self.score_repo = ScoreRepository(session)
        self.achievements = AchievementService(session)
        self.lock_window = timedelta(minutes=get_settings().prediction_lock_minutes)

    def lock_deadline(self, race: Race) -> datetime:
        """Moment after which a live race stops accepting predictions."""
        return race.date - self.lock_window

    def check_accepting(self, race: Race, now: datetime) -> None:
        """Raise ``PredictionLocked`` unless the race accepts predictions at ``now``."""
        if race.is_simulation:
            # results of simulation races stay hidden until the round closes
            if race.status != RaceStatus.OPEN.value:
                raise PredictionLocked(f"Race {race.id} is not the open round")
            return
        if race.has_results or race.status == RaceStatus.COMPLETED.value:
            raise PredictionLocked(f"Race {race.id} is already completed")
        if now >= self.lock_deadline(race):
            raise PredictionLocked(f"Predictions for race {race.id} closed at {self.lock_deadline(race).isoformat()}")

    async def submit_prediction(
        self,
        user_id: str,
        race_id: str,
        picks: list[str],
        confidence_level: int | None = 3,
        holeshot_rider_id: str | None = None,
        fastest_lap_rider_id: str | None = None,
        now: datetime | None = None,
    ) -> Prediction:
        """Store a user's top-5 prediction for a race.

        A second submission for the same race is rejected; the first one is
        kept as is.
        """
        now = now or utcnow()
        race = await self.race_repo.get(race_id)
        if race is None:
            raise NotFoundError("Race", race_id)

        validate_picks(picks)
        confidence_level = validate_confidence(confidence_level)

        wanted = list(picks) + [r for r in (holeshot_rider_id, fastest_lap_rider_id) if r]
        known = await self.rider_repo.get_many(wanted)
        for rider_id in wanted:
            if rider_id not in known:
                raise NotFoundError("Rider", rider_id)

        self.check_accepting(race, now)

        if await self.prediction_repo.get_by_user_and_race(user_id, race_id) is not None:
            raise DuplicatePrediction(user_id, race_id)

        prediction = Prediction(
            user_id=user_id,
            race_id=race_id,
            picks=list(picks),
            confidence_level=confidence_level,
            holeshot_rider_id=holeshot_rider_id,
            fastest_lap_rider_id=fastest_lap_rider_id,
            submitted_at=now,
        )
        self.session.add(prediction)
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicatePrediction(user_id, race_id) from e

        logger.info("User %s predicted race %s: %s", user_id, race_id, ", ".join(picks))
        await self.achievements.refresh_profile(user_id, now=now)
        return prediction

    async def get_prediction(self, user_id: str, race_id: str) -> Prediction:
        prediction = await self.prediction_repo.get_by_user_and_race(user_id, race_id)
        if prediction is None:
            raise NotFoundError("Prediction", f"{user_id}/{race_id}")
        return prediction

    async def get_score(self, user_id: str, race_id: str) -> PredictionScore:
        """Score of a user's prediction; 404 until results are in."""
        score = await self.score_repo.get_by_user_and_race(user_id, race_id)
        if score is None:
            raise NotFoundError("Score", f"{user_id}/{race_id}")
        return score

    async def get_user_predictions(self, user_id: str) -> list[Prediction]:
        """A user's predictions ordered by race date."""
        return await self.prediction_repo.get_by_user(user_id)

    async def delete_prediction(self, user_id: str, race_id: str) -> None:
        """Remove a prediction and its score, then rebuild the profile."""
        prediction = await self.get_prediction(user_id, race_id)
        score = await self.score_repo.get_by_prediction(prediction.id)
        if score is not None:
            await self.session.delete(score)
        await self.session.delete(prediction)
        await self.session.flush()

        logger.info("Deleted prediction of user %s for race %s", user_id, race_id)
        await self.achievements.refresh_profile(user_id)
