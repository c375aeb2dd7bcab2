"""Fixture-backed fetcher.

The official sites only publish HTML; until a parser exists the sync
endpoints serve these fixtures in the same JSON shape a parser would
produce.
"""

import json
from typing import Any

from motosense.fetchers.base import DataFetcher

SCHEDULE_URL = "https://www.supercrosslive.com/schedule"
RIDERS_URL = "https://www.supercrosslive.com/riders"
RESULTS_URL = "https://www.supercrosslive.com/results"

DEFAULT_SOURCES: list[dict[str, Any]] = [
    {
        "id": "supercrosslive-schedule",
        "name": "SupercrossLIVE Schedule",
        "category": "schedule",
        "url": SCHEDULE_URL,
        "rate_limit_requests": 10,
        "rate_limit_period": 3600,
    },
    {
        "id": "supercrosslive-riders",
        "name": "SupercrossLIVE Riders",
        "category": "riders",
        "url": RIDERS_URL,
        "rate_limit_requests": 10,
        "rate_limit_period": 3600,
    },
    {
        "id": "supercrosslive-results",
        "name": "SupercrossLIVE Results",
        "category": "results",
        "url": RESULTS_URL,
        "rate_limit_requests": 20,
        "rate_limit_period": 3600,
    },
]

SCHEDULE_FIXTURE: list[dict[str, Any]] = [
    {
        "id": "sx-2025-r01",
        "name": "Anaheim 1",
        "series": "sx",
        "round": 1,
        "date": "2025-01-11T19:00:00-08:00",
        "trackId": "angel-stadium",
        "status": "completed",
        "venue": "Angel Stadium",
        "city": "Anaheim",
        "state": "CA",
    },
    {
        "id": "sx-2025-r02",
        "name": "San Diego",
        "series": "sx",
        "round": 2,
        "date": "2025-01-18T19:00:00-08:00",
        "trackId": "snapdragon-stadium",
        "status": "completed",
        "venue": "Snapdragon Stadium",
        "city": "San Diego",
        "state": "CA",
    },
    {
        "id": "sx-2025-r03",
        "name": "Anaheim 2",
        "series": "sx",
        "round": 3,
        "date": "2025-01-25T19:00:00-08:00",
        "trackId": "angel-stadium",
        "status": "upcoming",
        "venue": "Angel Stadium",
        "city": "Anaheim",
        "state": "CA",
    },
]

RIDERS_FIXTURE: list[dict[str, Any]] = [
    {"id": "jett-lawrence", "firstName": "Jett", "lastName": "Lawrence", "number": 18,
     "team": "Team Honda HRC", "series": "both", "nationality": "AUS", "status": "active"},
    {"id": "chase-sexton", "firstName": "Chase", "lastName": "Sexton", "number": 4,
     "team": "Red Bull KTM", "series": "both", "nationality": "USA", "status": "active"},
    {"id": "cooper-webb", "firstName": "Cooper", "lastName": "Webb", "number": 2,
     "team": "Monster Energy Yamaha Star Racing", "series": "sx", "nationality": "USA", "status": "active"},
    {"id": "eli-tomac", "firstName": "Eli", "lastName": "Tomac", "number": 3,
     "team": "Monster Energy Yamaha Star Racing", "series": "both", "nationality": "USA",
     "status": "injured", "injuryDetails": "Achilles"},
    {"id": "ken-roczen", "firstName": "Ken", "lastName": "Roczen", "number": 94,
     "team": "Progressive Insurance ECSTAR Suzuki", "series": "sx", "nationality": "GER", "status": "active"},
    {"id": "hunter-lawrence", "firstName": "Hunter", "lastName": "Lawrence", "number": 96,
     "team": "Team Honda HRC", "series": "both", "nationality": "AUS", "status": "active"},
]

RESULTS_FIXTURE: list[dict[str, Any]] = [
    {
        "raceId": "sx-2025-r01",
        "raceName": "Anaheim 1",
        "date": "2025-01-11",
        "results": [
            {"raceId": "sx-2025-r01", "riderId": "jett-lawrence", "position": 1, "points": 26, "laps": 20,
             "status": "finished", "totalTime": "20:15.234", "bestLapTime": "00:45.123", "gap": "0.000"},
            {"raceId": "sx-2025-r01", "riderId": "chase-sexton", "position": 2, "points": 23, "laps": 20,
             "status": "finished", "totalTime": "20:20.456", "bestLapTime": "00:45.678", "gap": "+5.222"},
            {"raceId": "sx-2025-r01", "riderId": "cooper-webb", "position": 3, "points": 21, "laps": 20,
             "status": "finished", "totalTime": "20:25.789", "bestLapTime": "00:46.012", "gap": "+10.555"},
            {"raceId": "sx-2025-r01", "riderId": "ken-roczen", "position": 4, "points": 19, "laps": 20,
             "status": "finished", "totalTime": "20:31.101", "bestLapTime": "00:46.201", "gap": "+15.867"},
            {"raceId": "sx-2025-r01", "riderId": "hunter-lawrence", "position": 5, "points": 18, "laps": 20,
             "status": "finished", "totalTime": "20:36.412", "bestLapTime": "00:46.330", "gap": "+21.178"},
        ],
    },
    {
        "raceId": "sx-2025-r02",
        "raceName": "San Diego",
        "date": "2025-01-18",
        "results": [
            {"raceId": "sx-2025-r02", "riderId": "chase-sexton", "position": 1, "points": 26, "laps": 20,
             "status": "finished", "totalTime": "19:45.123", "bestLapTime": "00:44.567", "gap": "0.000"},
            {"raceId": "sx-2025-r02", "riderId": "jett-lawrence", "position": 2, "points": 23, "laps": 20,
             "status": "finished", "totalTime": "19:48.456", "bestLapTime": "00:44.890", "gap": "+3.333"},
            {"raceId": "sx-2025-r02", "riderId": "ken-roczen", "position": 3, "points": 21, "laps": 20,
             "status": "finished", "totalTime": "19:52.789", "bestLapTime": "00:45.234", "gap": "+7.666"},
            {"raceId": "sx-2025-r02", "riderId": "cooper-webb", "position": 4, "points": 19, "laps": 20,
             "status": "finished", "totalTime": "19:58.012", "bestLapTime": "00:45.410", "gap": "+12.889"},
            {"raceId": "sx-2025-r02", "riderId": "hunter-lawrence", "position": 5, "points": 18, "laps": 19,
             "status": "finished", "totalTime": "19:49.700", "bestLapTime": "00:45.800", "gap": "1 lap"},
        ],
    },
]


class FixtureFetcher(DataFetcher):
    """Serve canned payloads keyed by URL."""

    def __init__(self, payloads: dict[str, Any] | None = None):
        self.payloads = payloads if payloads is not None else {
            SCHEDULE_URL: SCHEDULE_FIXTURE,
            RIDERS_URL: RIDERS_FIXTURE,
            RESULTS_URL: RESULTS_FIXTURE,
        }

    async def fetch(self, url: str) -> str:
        payload = self.payloads.get(url, [])
        if isinstance(payload, str):
            return payload
        return json.dumps(payload, sort_keys=True)
