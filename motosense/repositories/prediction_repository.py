"""Prediction repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from motosense.models import Prediction, Race
from motosense.repositories.base import BaseRepository


class PredictionRepository(BaseRepository[Prediction]):
    """Repository for Prediction model."""

    def __init__(self, session: AsyncSession):
        super().__init__(Prediction, session)

    async def get_by_user_and_race(self, user_id: str, race_id: str) -> Prediction | None:
        """Get a user's prediction for a race."""
        result = await self.session.execute(
            select(Prediction).where(
                Prediction.user_id == user_id,
                Prediction.race_id == race_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_by_race(self, race_id: str) -> list[Prediction]:
        """All predictions on a race."""
        result = await self.session.execute(
            select(Prediction)
            .where(Prediction.race_id == race_id)
            .order_by(Prediction.submitted_at)
        )
        return list(result.scalars().all())

    async def get_by_user(self, user_id: str) -> list[Prediction]:
        """A user's predictions with their race, ordered by race date."""
        result = await self.session.execute(
            select(Prediction)
            .options(selectinload(Prediction.race), selectinload(Prediction.score))
            .where(Prediction.user_id == user_id)
            .order_by(Prediction.submitted_at)
        )
        predictions = list(result.scalars().all())
        return sorted(predictions, key=lambda p: p.race.date)

    async def get_history(self, user_id: str) -> list[tuple[Prediction, Race]]:
        """A user's predictions paired with their race, in submission order."""
        result = await self.session.execute(
            select(Prediction, Race)
            .join(Race, Prediction.race_id == Race.id)
            .where(Prediction.user_id == user_id)
            .order_by(Prediction.submitted_at, Prediction.id)
        )
        return [(prediction, race) for prediction, race in result.all()]
