"""Tests for record validation."""

import pytest

from motosense.exceptions import ValidationError
from motosense.fetchers import RaceResultItem, RaceScheduleItem, RiderDataItem
from motosense.services.validation import (
    validate_race_item,
    validate_result_item,
    validate_rider_item,
)


def race(**overrides) -> RaceScheduleItem:
    data = {
        "id": "sx-2025-r01",
        "name": "Anaheim 1",
        "series": "sx",
        "round": 1,
        "date": "2025-01-11T19:00:00-08:00",
        "track_id": "angel-stadium",
        "status": "upcoming",
    }
    data.update(overrides)
    return RaceScheduleItem(**data)


def rider(**overrides) -> RiderDataItem:
    data = {
        "id": "jett-lawrence",
        "first_name": "Jett",
        "last_name": "Lawrence",
        "number": 18,
        "team": "Team Honda HRC",
        "series": "both",
        "nationality": "AUS",
        "status": "active",
    }
    data.update(overrides)
    return RiderDataItem(**data)


def result(**overrides) -> RaceResultItem:
    data = {
        "race_id": "sx-2025-r01",
        "rider_id": "jett-lawrence",
        "position": 1,
        "points": 26,
        "status": "finished",
        "laps": 20,
    }
    data.update(overrides)
    return RaceResultItem(**data)


class TestValidateRace:
    def test_valid(self):
        assert validate_race_item(race()) == []

    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": ""},
            {"date": "not-a-date"},
            {"series": "ama"},
            {"round": 0},
            {"round": 21},
            {"round": "1"},
            {"status": "open"},
        ],
    )
    def test_invalid(self, overrides):
        with pytest.raises(ValidationError) as exc:
            validate_race_item(race(**overrides))
        assert exc.value.entity_id == "sx-2025-r01"


class TestValidateRider:
    def test_valid(self):
        assert validate_rider_item(rider()) == []

    def test_injured_without_details_only_warns(self):
        warnings = validate_rider_item(rider(status="injured"))

        assert len(warnings) == 1
        assert "injured" in warnings[0]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"number": 0},
            {"number": 1000},
            {"team": "  "},
            {"series": "ama"},
            {"status": "suspended"},
            {"first_name": ""},
        ],
    )
    def test_invalid(self, overrides):
        with pytest.raises(ValidationError):
            validate_rider_item(rider(**overrides))


class TestValidateResult:
    def test_valid(self):
        assert validate_result_item(result()) == []

    def test_dnf_without_laps_is_valid(self):
        assert validate_result_item(result(status="dnf", laps=None, points=0, position=22)) == []

    @pytest.mark.parametrize(
        "overrides",
        [
            {"position": 0},
            {"position": 23},
            {"points": -1},
            {"points": 27},
            {"status": "crashed"},
            {"laps": 0},
            {"laps": None},
            {"rider_id": ""},
        ],
    )
    def test_invalid(self, overrides):
        with pytest.raises(ValidationError):
            validate_result_item(result(**overrides))

    def test_lists_every_problem(self):
        with pytest.raises(ValidationError) as exc:
            validate_result_item(result(position=0, points=99))

        assert "position" in exc.value.message
        assert "points" in exc.value.message
