"""Prediction score repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from motosense.models import PredictionScore
from motosense.repositories.base import BaseRepository


class ScoreRepository(BaseRepository[PredictionScore]):
    """Repository for PredictionScore model."""

    def __init__(self, session: AsyncSession):
        super().__init__(PredictionScore, session)

    async def get_by_prediction(self, prediction_id: int) -> PredictionScore | None:
        """Get the score of a prediction."""
        result = await self.session.execute(
            select(PredictionScore).where(PredictionScore.prediction_id == prediction_id)
        )
        return result.scalar_one_or_none()

    async def get_by_user_and_race(self, user_id: str, race_id: str) -> PredictionScore | None:
        """Get a user's score for a race."""
        result = await self.session.execute(
            select(PredictionScore).where(
                PredictionScore.user_id == user_id,
                PredictionScore.race_id == race_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_by_user(self, user_id: str) -> list[PredictionScore]:
        """All scores of a user."""
        result = await self.session.execute(
            select(PredictionScore).where(PredictionScore.user_id == user_id)
        )
        return list(result.scalars().all())

    async def delete_by_race(self, race_id: str) -> list[str]:
        """Delete all scores of a race and return the affected user IDs."""
        result = await self.session.execute(
            select(PredictionScore).where(PredictionScore.race_id == race_id)
        )
        scores = list(result.scalars().all())
        for score in scores:
            await self.session.delete(score)
        await self.session.flush()
        return sorted({score.user_id for score in scores})
