"""Rider repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from motosense.models import Rider
from motosense.repositories.base import BaseRepository


class RiderRepository(BaseRepository[Rider]):
    """Repository for Rider model."""

    def __init__(self, session: AsyncSession):
        super().__init__(Rider, session)

    async def get_many(self, rider_ids: list[str]) -> dict[str, Rider]:
        """Riders keyed by ID; unknown IDs are absent from the result."""
        if not rider_ids:
            return {}
        result = await self.session.execute(select(Rider).where(Rider.id.in_(rider_ids)))
        return {rider.id: rider for rider in result.scalars().all()}

    async def get_by_status(self, status: str) -> list[Rider]:
        """Get riders with the given status."""
        result = await self.session.execute(
            select(Rider).where(Rider.status == status).order_by(Rider.number)
        )
        return list(result.scalars().all())
