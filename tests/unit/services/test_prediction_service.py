"""Tests for prediction submission."""

import pytest

from motosense.exceptions import DuplicatePrediction, NotFoundError, PredictionLocked, ValidationError
from motosense.models import RaceStatus
from motosense.repositories import PredictionRepository, ProfileRepository
from motosense.services.prediction_service import PredictionService

from tests.fixtures.factories import RIDER_IDS, utc

PICKS = RIDER_IDS[:5]


class TestSubmitPrediction:
    """Tests for PredictionService.submit_prediction."""

    @pytest.mark.asyncio
    async def test_submit_live_race(self, db_session, test_riders, live_race):
        service = PredictionService(db_session)

        prediction = await service.submit_prediction(
            "user-1", live_race.id, PICKS, confidence_level=4, now=utc(2030, 1, 5)
        )

        assert prediction.id is not None
        assert prediction.picks == PICKS
        assert prediction.confidence_level == 4
        assert prediction.submitted_at == utc(2030, 1, 5)

    @pytest.mark.asyncio
    async def test_default_confidence(self, db_session, test_riders, live_race):
        prediction = await PredictionService(db_session).submit_prediction(
            "user-1", live_race.id, PICKS, confidence_level=None, now=utc(2030, 1, 5)
        )

        assert prediction.confidence_level == 3

    @pytest.mark.asyncio
    async def test_duplicate_keeps_original(self, db_session, test_riders, live_race):
        service = PredictionService(db_session)
        await service.submit_prediction("user-1", live_race.id, PICKS, now=utc(2030, 1, 5))

        with pytest.raises(DuplicatePrediction):
            await service.submit_prediction(
                "user-1", live_race.id, list(reversed(PICKS)), now=utc(2030, 1, 6)
            )

        stored = await PredictionRepository(db_session).get_by_race(live_race.id)
        assert len(stored) == 1
        assert stored[0].picks == PICKS
        assert stored[0].submitted_at == utc(2030, 1, 5)

    @pytest.mark.asyncio
    async def test_other_users_can_predict(self, db_session, test_riders, live_race):
        service = PredictionService(db_session)
        await service.submit_prediction("user-1", live_race.id, PICKS, now=utc(2030, 1, 5))
        await service.submit_prediction("user-2", live_race.id, PICKS, now=utc(2030, 1, 5))

        assert len(await PredictionRepository(db_session).get_by_race(live_race.id)) == 2

    @pytest.mark.asyncio
    async def test_unknown_race(self, db_session, test_riders):
        with pytest.raises(NotFoundError):
            await PredictionService(db_session).submit_prediction("user-1", "nope", PICKS)

    @pytest.mark.asyncio
    async def test_unknown_rider(self, db_session, test_riders, live_race):
        picks = PICKS[:4] + ["nobody"]

        with pytest.raises(NotFoundError) as exc:
            await PredictionService(db_session).submit_prediction(
                "user-1", live_race.id, picks, now=utc(2030, 1, 5)
            )

        assert exc.value.entity_id == "nobody"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "picks",
        [PICKS[:4], PICKS[:4] + [PICKS[0]], PICKS + [RIDER_IDS[5]]],
        ids=["too-few", "repeated", "too-many"],
    )
    async def test_invalid_picks(self, db_session, test_riders, live_race, picks):
        with pytest.raises(ValidationError):
            await PredictionService(db_session).submit_prediction(
                "user-1", live_race.id, picks, now=utc(2030, 1, 5)
            )

    @pytest.mark.asyncio
    async def test_invalid_confidence(self, db_session, test_riders, live_race):
        with pytest.raises(ValidationError):
            await PredictionService(db_session).submit_prediction(
                "user-1", live_race.id, PICKS, confidence_level=6, now=utc(2030, 1, 5)
            )


class TestLocking:
    """Tests for prediction windows."""

    @pytest.mark.asyncio
    async def test_live_race_accepts_until_lock(self, db_session, test_riders, live_race):
        service = PredictionService(db_session)

        # race starts 19:00, lock is one hour earlier
        await service.submit_prediction("user-1", live_race.id, PICKS, now=utc(2030, 1, 12, 17))

        with pytest.raises(PredictionLocked):
            await service.submit_prediction("user-2", live_race.id, PICKS, now=utc(2030, 1, 12, 18))

    @pytest.mark.asyncio
    async def test_live_race_with_results_is_locked(self, db_session, test_riders, live_race):
        live_race.has_results = True
        await db_session.flush()

        with pytest.raises(PredictionLocked):
            await PredictionService(db_session).submit_prediction(
                "user-1", live_race.id, PICKS, now=utc(2030, 1, 5)
            )

    @pytest.mark.asyncio
    async def test_simulation_race_must_be_open(self, db_session, test_riders, simulation_races):
        race = simulation_races[0]
        service = PredictionService(db_session)

        # long after the nominal race date, but the round is what matters
        with pytest.raises(PredictionLocked):
            await service.submit_prediction("user-1", race.id, PICKS, now=utc(2025, 3, 1))

        race.status = RaceStatus.OPEN.value
        race.has_results = True
        await db_session.flush()

        prediction = await service.submit_prediction("user-1", race.id, PICKS, now=utc(2025, 3, 1))
        assert prediction.race_id == race.id

    @pytest.mark.asyncio
    async def test_completed_simulation_race_is_locked(self, db_session, test_riders, simulation_races):
        race = simulation_races[0]
        race.status = RaceStatus.COMPLETED.value
        await db_session.flush()

        with pytest.raises(PredictionLocked):
            await PredictionService(db_session).submit_prediction("user-1", race.id, PICKS)


class TestProfileUpdates:
    @pytest.mark.asyncio
    async def test_submission_updates_profile(self, db_session, test_riders, live_race):
        await PredictionService(db_session).submit_prediction(
            "user-1", live_race.id, PICKS, now=utc(2030, 1, 5)
        )

        profile = await ProfileRepository(db_session).get("user-1")
        assert profile.total_predictions == 1
        assert profile.current_streak == 1
        # first_prediction + early_bird
        assert profile.achievement_points == 250
        assert profile.total_points == 250

    @pytest.mark.asyncio
    async def test_weekly_predictions_build_streak(self, db_session, test_riders, simulation_races):
        service = PredictionService(db_session)
        for race in simulation_races:
            race.status = RaceStatus.OPEN.value
            await db_session.flush()
            await service.submit_prediction("user-1", race.id, PICKS, now=utc(2025, 1, 1))
            race.status = RaceStatus.COMPLETED.value
            await db_session.flush()

        profile = await ProfileRepository(db_session).get("user-1")
        assert profile.current_streak == 3
        assert profile.longest_streak == 3
        assert profile.last_prediction_race_date == simulation_races[-1].date

    @pytest.mark.asyncio
    async def test_delete_prediction(self, db_session, test_riders, live_race):
        service = PredictionService(db_session)
        await service.submit_prediction("user-1", live_race.id, PICKS, now=utc(2030, 1, 5))

        await service.delete_prediction("user-1", live_race.id)

        with pytest.raises(NotFoundError):
            await service.get_prediction("user-1", live_race.id)
        profile = await ProfileRepository(db_session).get("user-1")
        assert profile.total_predictions == 0

    @pytest.mark.asyncio
    async def test_score_missing_until_results(self, db_session, test_riders, live_race):
        service = PredictionService(db_session)
        await service.submit_prediction("user-1", live_race.id, PICKS, now=utc(2030, 1, 5))

        with pytest.raises(NotFoundError):
            await service.get_score("user-1", live_race.id)
