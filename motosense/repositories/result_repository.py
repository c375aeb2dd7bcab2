"""Race result repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from motosense.models import RaceResult
from motosense.repositories.base import BaseRepository


class ResultRepository(BaseRepository[RaceResult]):
    """Repository for RaceResult model."""

    def __init__(self, session: AsyncSession):
        super().__init__(RaceResult, session)

    async def get_by_race(self, race_id: str) -> list[RaceResult]:
        """Results for a race in finishing order."""
        result = await self.session.execute(
            select(RaceResult)
            .where(RaceResult.race_id == race_id)
            .order_by(RaceResult.position)
        )
        return list(result.scalars().all())

    async def get_by_race_and_rider(self, race_id: str, rider_id: str) -> RaceResult | None:
        """Get one rider's result in a race."""
        result = await self.session.execute(
            select(RaceResult).where(
                RaceResult.race_id == race_id,
                RaceResult.rider_id == rider_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_finishing_order(self, race_id: str) -> list[str]:
        """Rider IDs of a race in finishing order."""
        return [r.rider_id for r in await self.get_by_race(race_id)]

    async def delete_by_race(self, race_id: str) -> int:
        """Delete all results of a race."""
        results = await self.get_by_race(race_id)
        for row in results:
            await self.session.delete(row)
        await self.session.flush()
        return len(results)
