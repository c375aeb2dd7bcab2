"""Tests for the round state machine."""

from datetime import timedelta

import pytest
from sqlalchemy import select

from motosense.exceptions import NoMoreRounds, NoPreviousRound, NoRoundOpen, NotFoundError, RoundConflict
from motosense.fetchers import RaceResultItem
from motosense.models import Race, RaceStatus
from motosense.repositories import ProfileRepository
from motosense.services.prediction_service import PredictionService
from motosense.services.results_service import ResultsService
from motosense.services.round_service import RoundService

from tests.fixtures.factories import RIDER_IDS, utc

NOW = utc(2025, 3, 1, 12)


async def statuses(db_session, season_id="demo-2025") -> dict[str, str]:
    result = await db_session.execute(
        select(Race.id, Race.status).where(Race.season_id == season_id).order_by(Race.date)
    )
    return dict(result.all())


class TestProgress:
    """Tests for RoundService.progress."""

    @pytest.mark.asyncio
    async def test_opens_first_round(self, db_session, simulation_races):
        service = RoundService(db_session)

        transition = await service.progress("demo-2025", now=NOW)

        assert transition.action == "progress"
        assert transition.closed_race_id is None
        assert transition.opened_race_id == "demo-2025-r01"
        race = simulation_races[0]
        assert race.status == RaceStatus.OPEN.value
        assert race.opened_at == NOW
        assert race.closes_at == NOW + timedelta(hours=48)

    @pytest.mark.asyncio
    async def test_closes_and_opens_next(self, db_session, simulation_races):
        service = RoundService(db_session)
        await service.progress("demo-2025", now=NOW)

        transition = await service.progress("demo-2025", now=NOW + timedelta(hours=1))

        assert transition.closed_race_id == "demo-2025-r01"
        assert transition.opened_race_id == "demo-2025-r02"
        assert await statuses(db_session) == {
            "demo-2025-r01": "completed",
            "demo-2025-r02": "open",
            "demo-2025-r03": "upcoming",
        }
        assert simulation_races[0].results_revealed_at == NOW + timedelta(hours=1)

    @pytest.mark.asyncio
    async def test_race_level_window(self, db_session, simulation_races):
        simulation_races[0].auto_progress_hours = 6
        await db_session.flush()

        await RoundService(db_session).progress("demo-2025", now=NOW)

        assert simulation_races[0].closes_at == NOW + timedelta(hours=6)

    @pytest.mark.asyncio
    async def test_last_round_is_closed_then_no_more_rounds(self, db_session, simulation_races):
        service = RoundService(db_session)
        for _ in range(3):
            await service.progress("demo-2025", now=NOW)

        with pytest.raises(NoMoreRounds) as exc:
            await service.progress("demo-2025", now=NOW)

        assert exc.value.closed_race_id == "demo-2025-r03"
        assert set((await statuses(db_session)).values()) == {"completed"}

    @pytest.mark.asyncio
    async def test_nothing_open_nothing_left(self, db_session, simulation_races):
        """No open round and no upcoming round: failure without side effects."""
        for race in simulation_races:
            race.status = RaceStatus.COMPLETED.value
        await db_session.flush()
        before = await statuses(db_session)

        with pytest.raises(NoMoreRounds) as exc:
            await RoundService(db_session).progress("demo-2025", now=NOW)

        assert exc.value.closed_race_id is None
        assert await statuses(db_session) == before

    @pytest.mark.asyncio
    async def test_ignores_live_races(self, db_session, simulation_races, live_race):
        await RoundService(db_session).progress("demo-2025", now=NOW)

        assert live_race.status == RaceStatus.UPCOMING.value


class TestDigress:
    """Tests for RoundService.digress."""

    @pytest.mark.asyncio
    async def test_reopens_previous(self, db_session, simulation_races):
        service = RoundService(db_session)
        await service.progress("demo-2025", now=NOW)
        await service.progress("demo-2025", now=NOW)

        transition = await service.digress("demo-2025", now=NOW + timedelta(days=1))

        assert transition.closed_race_id == "demo-2025-r02"
        assert transition.opened_race_id == "demo-2025-r01"
        first, second, _ = simulation_races
        assert first.status == RaceStatus.OPEN.value
        assert first.results_revealed_at is None
        assert first.opened_at == NOW + timedelta(days=1)
        assert second.status == RaceStatus.UPCOMING.value
        assert second.opened_at is None
        assert second.closes_at is None

    @pytest.mark.asyncio
    async def test_reopened_round_hides_its_scores(self, db_session, test_riders, simulation_races):
        service = RoundService(db_session)
        await service.progress("demo-2025", now=NOW)
        await PredictionService(db_session).submit_prediction("user-1", "demo-2025-r01", RIDER_IDS[:5], now=NOW)
        await ResultsService(db_session).enter_results(
            "demo-2025-r01",
            [
                RaceResultItem(race_id="demo-2025-r01", rider_id=r, position=i, points=0, status="finished", laps=20)
                for i, r in enumerate(RIDER_IDS, 1)
            ],
            now=NOW,
        )
        await service.progress("demo-2025", now=NOW + timedelta(hours=1))
        assert (await ProfileRepository(db_session).get("user-1")).prediction_points == 100

        await service.digress("demo-2025", now=NOW + timedelta(hours=2))

        with pytest.raises(NotFoundError):
            await PredictionService(db_session).get_score("user-1", "demo-2025-r01")
        profile = await ProfileRepository(db_session).get("user-1")
        assert profile.prediction_points == 0
        assert profile.scored_predictions == 0

        await service.progress("demo-2025", now=NOW + timedelta(hours=3))

        score = await PredictionService(db_session).get_score("user-1", "demo-2025-r01")
        assert score.total_points == 100

    @pytest.mark.asyncio
    async def test_requires_open_round(self, db_session, simulation_races):
        with pytest.raises(NoRoundOpen):
            await RoundService(db_session).digress("demo-2025", now=NOW)

    @pytest.mark.asyncio
    async def test_first_round_has_no_previous(self, db_session, simulation_races):
        service = RoundService(db_session)
        await service.progress("demo-2025", now=NOW)
        before = await statuses(db_session)

        with pytest.raises(NoPreviousRound):
            await service.digress("demo-2025", now=NOW)

        assert await statuses(db_session) == before


class TestReset:
    @pytest.mark.asyncio
    async def test_reset_clears_everything(self, db_session, simulation_races):
        service = RoundService(db_session)
        await service.progress("demo-2025", now=NOW)
        await service.progress("demo-2025", now=NOW)

        transition = await service.reset("demo-2025")

        assert transition.action == "reset"
        assert set((await statuses(db_session)).values()) == {"upcoming"}
        for race in simulation_races:
            assert race.opened_at is None
            assert race.closes_at is None
            assert race.results_revealed_at is None

    @pytest.mark.asyncio
    async def test_reset_is_idempotent(self, db_session, simulation_races):
        service = RoundService(db_session)

        await service.reset("demo-2025")
        await service.reset("demo-2025")

        assert set((await statuses(db_session)).values()) == {"upcoming"}


class TestInvariant:
    @pytest.mark.asyncio
    async def test_at_most_one_open_round(self, db_session, simulation_races):
        """Any sequence of transitions leaves at most one round open."""
        service = RoundService(db_session)
        steps = ["progress", "progress", "digress", "progress", "reset", "progress", "progress", "progress"]

        for step in steps:
            try:
                await getattr(service, step)("demo-2025")
            except (NoMoreRounds, NoPreviousRound, NoRoundOpen):
                pass
            open_count = list((await statuses(db_session)).values()).count("open")
            assert open_count <= 1

    @pytest.mark.asyncio
    async def test_two_open_rounds_is_a_conflict(self, db_session, simulation_races):
        for race in simulation_races[:2]:
            race.status = RaceStatus.OPEN.value
        await db_session.flush()

        with pytest.raises(RoundConflict):
            await RoundService(db_session).progress("demo-2025", now=NOW)

        assert simulation_races[2].status == RaceStatus.UPCOMING.value

    @pytest.mark.asyncio
    async def test_current_round(self, db_session, simulation_races):
        service = RoundService(db_session)
        assert await service.current_round("demo-2025") is None

        await service.progress("demo-2025", now=NOW)

        current = await service.current_round("demo-2025")
        assert current.id == "demo-2025-r01"


class TestAutoProgress:
    @pytest.mark.asyncio
    async def test_noop_before_window_expires(self, db_session, simulation_races):
        service = RoundService(db_session)
        await service.progress("demo-2025", now=NOW)

        transition = await service.auto_progress("demo-2025", now=NOW + timedelta(hours=47))

        assert transition.action == "none"
        assert simulation_races[0].status == RaceStatus.OPEN.value

    @pytest.mark.asyncio
    async def test_progresses_after_window(self, db_session, simulation_races):
        service = RoundService(db_session)
        await service.progress("demo-2025", now=NOW)

        transition = await service.auto_progress("demo-2025", now=NOW + timedelta(hours=48))

        assert transition.action == "auto_progress"
        assert transition.opened_race_id == "demo-2025-r02"
