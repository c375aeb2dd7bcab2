"""Race repository."""

from datetime import datetime

from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from motosense.models import Race, RaceStatus
from motosense.models.base import utcnow
from motosense.repositories.base import BaseRepository


class RaceRepository(BaseRepository[Race]):
    """Repository for Race model."""

    def __init__(self, session: AsyncSession):
        super().__init__(Race, session)

    async def list_races(
        self,
        season_id: str | None = None,
        series: str | None = None,
        status: str | None = None,
        limit: int = 100,
    ) -> list[Race]:
        """List races ordered by date."""
        query = select(Race)
        if season_id:
            query = query.where(Race.season_id == season_id)
        if series:
            query = query.where(Race.series == series)
        if status:
            query = query.where(Race.status == status)

        result = await self.session.execute(query.order_by(Race.date).limit(limit))
        return list(result.scalars().all())

    async def get_simulation_races(self, season_id: str) -> list[Race]:
        """All simulation races of a season, earliest first."""
        result = await self.session.execute(
            select(Race)
            .where(Race.season_id == season_id, Race.is_simulation.is_(True))
            .order_by(Race.date, Race.round)
        )
        return list(result.scalars().all())

    async def get_open_races(self, season_id: str, fresh: bool = False) -> list[Race]:
        """Simulation races currently open for predictions.

        ``fresh`` re-reads rows already in the session from the database.
        """
        query = (
            select(Race)
            .where(
                Race.season_id == season_id,
                Race.is_simulation.is_(True),
                Race.status == RaceStatus.OPEN.value,
            )
            .order_by(Race.date)
        )
        if fresh:
            query = query.execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_next_upcoming(
        self, season_id: str, after: datetime | None = None
    ) -> Race | None:
        """Earliest upcoming simulation race, optionally later than ``after``."""
        query = select(Race).where(
            Race.season_id == season_id,
            Race.is_simulation.is_(True),
            Race.status == RaceStatus.UPCOMING.value,
        )
        if after is not None:
            query = query.where(Race.date > after)

        result = await self.session.execute(query.order_by(Race.date, Race.round).limit(1))
        return result.scalar_one_or_none()

    async def get_previous_completed(self, season_id: str, before: datetime) -> Race | None:
        """Latest completed simulation race earlier than ``before``."""
        result = await self.session.execute(
            select(Race)
            .where(
                Race.season_id == season_id,
                Race.is_simulation.is_(True),
                Race.status == RaceStatus.COMPLETED.value,
                Race.date < before,
            )
            .order_by(Race.date.desc(), Race.round.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_many(self, race_ids: list[str]) -> dict[str, Race]:
        """Races keyed by ID."""
        if not race_ids:
            return {}
        result = await self.session.execute(select(Race).where(Race.id.in_(race_ids)))
        return {race.id: race for race in result.scalars().all()}

    async def set_status_if(self, race_id: str, expected_status: str, values: dict[str, Any]) -> bool:
        """Update a race only if its status is still ``expected_status``."""
        result = await self.session.execute(
            update(Race)
            .where(Race.id == race_id, Race.status == expected_status)
            .values(**values, updated_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1

    async def reset_simulation(self, season_id: str) -> int:
        """Put every simulation race of a season back to upcoming."""
        result = await self.session.execute(
            update(Race)
            .where(Race.season_id == season_id, Race.is_simulation.is_(True))
            .values(
                status=RaceStatus.UPCOMING.value,
                opened_at=None,
                closes_at=None,
                results_revealed_at=None,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
