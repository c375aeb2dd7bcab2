"""Tests for predictions API endpoints."""

import pytest

from motosense.models import RaceStatus

from tests.fixtures.factories import RIDER_IDS

PICKS = RIDER_IDS[:5]


def payload(race_id: str, user_id: str = "user-1", picks: list[str] = PICKS, **kwargs) -> dict:
    return {"user_id": user_id, "race_id": race_id, "picks": picks, **kwargs}


class TestPredictionsAPI:
    """Tests for /api/predictions endpoints."""

    @pytest.mark.asyncio
    async def test_submit_prediction(self, client, test_riders, live_race):
        """POST /api/predictions stores a prediction."""
        response = await client.post("/api/predictions", json=payload(live_race.id, confidence_level=4))

        assert response.status_code == 201
        data = response.json()
        assert data["picks"] == PICKS
        assert data["confidence_level"] == 4
        assert data["race_id"] == live_race.id

    @pytest.mark.asyncio
    async def test_submit_duplicate(self, client, test_riders, live_race):
        """A second submission for the same race returns 409."""
        await client.post("/api/predictions", json=payload(live_race.id))

        response = await client.post(
            "/api/predictions", json=payload(live_race.id, picks=list(reversed(PICKS)))
        )

        assert response.status_code == 409
        assert response.json()["code"] == "DUPLICATE_PREDICTION"

        stored = await client.get(f"/api/predictions/{live_race.id}?user_id=user-1")
        assert stored.json()["picks"] == PICKS

    @pytest.mark.asyncio
    async def test_submit_locked(self, client, test_riders, simulation_races):
        """Predicting a simulation race that is not open returns 423."""
        response = await client.post("/api/predictions", json=payload(simulation_races[0].id))

        assert response.status_code == 423
        assert response.json()["code"] == "PREDICTION_LOCKED"

    @pytest.mark.asyncio
    async def test_submit_open_round(self, client, db_session, test_riders, simulation_races):
        simulation_races[1].status = RaceStatus.OPEN.value
        await db_session.commit()

        response = await client.post("/api/predictions", json=payload(simulation_races[1].id))

        assert response.status_code == 201

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "picks",
        [PICKS[:4], PICKS[:4] + [PICKS[0]]],
        ids=["four-picks", "repeated-rider"],
    )
    async def test_submit_invalid_picks(self, client, test_riders, live_race, picks):
        """POST /api/predictions rejects anything but five distinct riders."""
        response = await client.post("/api/predictions", json=payload(live_race.id, picks=picks))

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_submit_invalid_confidence(self, client, test_riders, live_race):
        response = await client.post("/api/predictions", json=payload(live_race.id, confidence_level=9))

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_submit_unknown_race(self, client, test_riders):
        """POST /api/predictions returns 404 for a missing race."""
        response = await client.post("/api/predictions", json=payload("sx-1999-r01"))

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_submit_unknown_rider(self, client, test_riders, live_race):
        response = await client.post(
            "/api/predictions", json=payload(live_race.id, picks=PICKS[:4] + ["nobody"])
        )

        assert response.status_code == 404
        assert "nobody" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_get_prediction_not_found(self, client, live_race):
        response = await client.get(f"/api/predictions/{live_race.id}?user_id=user-1")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_user_history(self, client, test_riders, live_race):
        """GET /api/predictions/user/{user_id} lists predictions with their race."""
        await client.post("/api/predictions", json=payload(live_race.id))

        response = await client.get("/api/predictions/user/user-1")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["race_name"] == live_race.name
        assert data["items"][0]["score"] is None

    @pytest.mark.asyncio
    async def test_score_after_results(self, client, test_riders, live_race, auth_headers):
        """GET /api/predictions/{race_id}/score is available once results are in."""
        await client.post("/api/predictions", json=payload(live_race.id))
        missing = await client.get(f"/api/predictions/{live_race.id}/score?user_id=user-1")
        assert missing.status_code == 404

        results = [{"rider_id": r, "position": i, "laps": 20} for i, r in enumerate(RIDER_IDS, 1)]
        await client.post(f"/api/races/{live_race.id}/results", json={"results": results}, headers=auth_headers)

        response = await client.get(f"/api/predictions/{live_race.id}/score?user_id=user-1")

        assert response.status_code == 200
        data = response.json()
        assert data["exact_matches"] == 5
        assert data["total_points"] == 100

    @pytest.mark.asyncio
    async def test_delete_prediction(self, client, test_riders, live_race):
        """DELETE /api/predictions/{race_id} removes the prediction."""
        await client.post("/api/predictions", json=payload(live_race.id))

        response = await client.delete(f"/api/predictions/{live_race.id}?user_id=user-1")

        assert response.status_code == 204
        again = await client.get(f"/api/predictions/{live_race.id}?user_id=user-1")
        assert again.status_code == 404
