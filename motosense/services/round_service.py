"""Open-round state machine for simulation seasons.

Each simulation race is ``upcoming``, ``open`` or ``completed`` and at most
one race per season is open. Every transition re-reads the open set right
before writing and updates rows only if their status is still the one that
was read, so a concurrent transition surfaces as ``RoundConflict``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from motosense.config import get_settings
from motosense.exceptions import NoMoreRounds, NoPreviousRound, NoRoundOpen, RoundConflict
from motosense.models import Race, RaceStatus
from motosense.models.base import utcnow
from motosense.repositories import RaceRepository, ScoreRepository
from motosense.services.achievement_service import AchievementService
from motosense.services.results_service import ResultsService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundTransition:
    """Outcome of a round transition."""

    action: str  # progress / digress / reset / auto_progress / none
    closed_race_id: str | None = None
    opened_race_id: str | None = None
    message: str = ""


class RoundService:
    """Service driving round progression of a simulation season."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.race_repo = RaceRepository(session)
        self.score_repo = ScoreRepository(session)
        self.auto_progress_hours = get_settings().auto_progress_hours

    async def current_round(self, season_id: str) -> Race | None:
        """The open race of the season, if any."""
        open_races = await self.race_repo.get_open_races(season_id)
        if len(open_races) > 1:
            raise RoundConflict(f"Season {season_id} has {len(open_races)} open rounds")
        return open_races[0] if open_races else None

    async def _read_open(self, season_id: str) -> Race | None:
        open_races = await self.race_repo.get_open_races(season_id, fresh=True)
        if len(open_races) > 1:
            raise RoundConflict(f"Season {season_id} has {len(open_races)} open rounds")
        return open_races[0] if open_races else None

    async def _swap(self, race: Race, expected: RaceStatus, values: dict) -> None:
        if not await self.race_repo.set_status_if(race.id, expected.value, values):
            raise RoundConflict(f"Race {race.id} is no longer {expected.value}")

    def _open_values(self, race: Race, now: datetime) -> dict:
        hours = race.auto_progress_hours or self.auto_progress_hours
        return {
            "status": RaceStatus.OPEN.value,
            "opened_at": now,
            "closes_at": now + timedelta(hours=hours),
            "results_revealed_at": None,
        }

    async def progress(self, season_id: str, now: datetime | None = None) -> RoundTransition:
        """Close the open round and open the next upcoming one.

        Closing a round reveals its results, so its predictions are scored.
        With no round open the earliest upcoming race is opened. When there is
        nothing left to open ``NoMoreRounds`` is raised; an open round is still
        closed in that case and the exception carries its ID.
        """
        now = now or utcnow()
        current = await self._read_open(season_id)
        next_race = await self.race_repo.get_next_upcoming(
            season_id, after=current.date if current else None
        )

        if current is None and next_race is None:
            raise NoMoreRounds(f"Season {season_id} has no upcoming round to open")

        closed_id = None
        if current is not None:
            await self._swap(current, RaceStatus.OPEN, {
                "status": RaceStatus.COMPLETED.value,
                "results_revealed_at": now,
            })
            closed_id = current.id
            if current.has_results:
                await ResultsService(self.session).recalculate_race_scores(current.id, now=now)

        if next_race is None:
            logger.info("Season %s: closed %s, no rounds left", season_id, closed_id)
            raise NoMoreRounds(
                f"Closed {closed_id}; season {season_id} has no upcoming round left",
                closed_race_id=closed_id,
            )

        await self._swap(next_race, RaceStatus.UPCOMING, self._open_values(next_race, now))
        await self.session.flush()

        message = f"Opened {next_race.name}" if closed_id is None else f"Closed {closed_id}, opened {next_race.name}"
        logger.info("Season %s: %s", season_id, message)
        return RoundTransition("progress", closed_race_id=closed_id, opened_race_id=next_race.id, message=message)

    async def digress(self, season_id: str, now: datetime | None = None) -> RoundTransition:
        """Send the open round back to upcoming and reopen the previous one.

        The reopened round's results are hidden again, so the scores derived
        from them are dropped and the affected profiles recomputed. Closing
        it again rescores.
        """
        now = now or utcnow()
        current = await self._read_open(season_id)
        if current is None:
            raise NoRoundOpen(f"Season {season_id} has no open round")

        previous = await self.race_repo.get_previous_completed(season_id, before=current.date)
        if previous is None:
            raise NoPreviousRound(f"No completed round before {current.id}")

        await self._swap(current, RaceStatus.OPEN, {
            "status": RaceStatus.UPCOMING.value,
            "opened_at": None,
            "closes_at": None,
        })
        await self._swap(previous, RaceStatus.COMPLETED, self._open_values(previous, now))
        await self.session.flush()

        affected_users = await self.score_repo.delete_by_race(previous.id)
        achievements = AchievementService(self.session)
        for user_id in affected_users:
            await achievements.refresh_profile(user_id, now=now)

        message = f"Reverted {current.id}, reopened {previous.name}"
        logger.info("Season %s: %s", season_id, message)
        return RoundTransition("digress", closed_race_id=current.id, opened_race_id=previous.id, message=message)

    async def reset(self, season_id: str) -> RoundTransition:
        """Every simulation race of the season back to upcoming."""
        count = await self.race_repo.reset_simulation(season_id)
        await self.session.flush()
        logger.info("Season %s: reset %d simulation races", season_id, count)
        return RoundTransition("reset", message=f"Reset {count} races to upcoming")

    async def auto_progress(self, season_id: str, now: datetime | None = None) -> RoundTransition:
        """Progress when the open round's ``closes_at`` has passed."""
        now = now or utcnow()
        current = await self.current_round(season_id)
        if current is None or current.closes_at is None or current.closes_at > now:
            return RoundTransition("none", message="Open round has not expired")

        transition = await self.progress(season_id, now=now)
        return RoundTransition(
            "auto_progress",
            closed_race_id=transition.closed_race_id,
            opened_race_id=transition.opened_race_id,
            message=transition.message,
        )
