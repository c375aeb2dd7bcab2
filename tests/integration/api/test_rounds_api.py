"""Tests for round progression API endpoints."""

import pytest


class TestRoundsAPI:
    """Tests for /api/rounds endpoints."""

    @pytest.mark.asyncio
    async def test_current_round_empty(self, client, simulation_races):
        """GET /api/rounds/{season_id}/current returns no race before the first round."""
        response = await client.get("/api/rounds/demo-2025/current")

        assert response.status_code == 200
        assert response.json() == {"season_id": "demo-2025", "race": None}

    @pytest.mark.asyncio
    async def test_progress(self, client, simulation_races, auth_headers):
        """POST /api/rounds/{season_id}/progress opens the next round."""
        response = await client.post("/api/rounds/demo-2025/progress", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["action"] == "progress"
        assert data["opened_race_id"] == "demo-2025-r01"

        current = await client.get("/api/rounds/demo-2025/current")
        assert current.json()["race"]["id"] == "demo-2025-r01"
        assert current.json()["race"]["status"] == "open"

    @pytest.mark.asyncio
    async def test_progress_requires_token(self, client, simulation_races):
        response = await client.post("/api/rounds/demo-2025/progress")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_progress_past_last_round(self, client, simulation_races, auth_headers):
        """Closing the last round answers 409 but keeps the round closed."""
        for _ in range(3):
            await client.post("/api/rounds/demo-2025/progress", headers=auth_headers)

        response = await client.post("/api/rounds/demo-2025/progress", headers=auth_headers)

        assert response.status_code == 409
        assert response.json()["code"] == "NO_MORE_ROUNDS"
        races = await client.get("/api/races?season_id=demo-2025")
        assert {r["status"] for r in races.json()["items"]} == {"completed"}

    @pytest.mark.asyncio
    async def test_digress_first_round(self, client, simulation_races, auth_headers):
        """POST /api/rounds/{season_id}/digress on round 1 returns 409."""
        await client.post("/api/rounds/demo-2025/progress", headers=auth_headers)

        response = await client.post("/api/rounds/demo-2025/digress", headers=auth_headers)

        assert response.status_code == 409
        assert response.json()["code"] == "NO_PREVIOUS_ROUND"

    @pytest.mark.asyncio
    async def test_digress_without_open_round(self, client, simulation_races, auth_headers):
        response = await client.post("/api/rounds/demo-2025/digress", headers=auth_headers)

        assert response.status_code == 409
        assert response.json()["code"] == "NO_ROUND_OPEN"

    @pytest.mark.asyncio
    async def test_digress(self, client, simulation_races, auth_headers):
        await client.post("/api/rounds/demo-2025/progress", headers=auth_headers)
        await client.post("/api/rounds/demo-2025/progress", headers=auth_headers)

        response = await client.post("/api/rounds/demo-2025/digress", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["opened_race_id"] == "demo-2025-r01"

    @pytest.mark.asyncio
    async def test_reset(self, client, simulation_races, auth_headers):
        """POST /api/rounds/{season_id}/reset puts every round back to upcoming."""
        await client.post("/api/rounds/demo-2025/progress", headers=auth_headers)

        response = await client.post("/api/rounds/demo-2025/reset", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["action"] == "reset"
        races = await client.get("/api/races?season_id=demo-2025")
        assert {r["status"] for r in races.json()["items"]} == {"upcoming"}

    @pytest.mark.asyncio
    async def test_auto_progress_not_expired(self, client, simulation_races, auth_headers):
        await client.post("/api/rounds/demo-2025/progress", headers=auth_headers)

        response = await client.post("/api/rounds/demo-2025/auto-progress", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["action"] == "none"
