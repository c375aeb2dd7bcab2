"""Typed records delivered by external sources.

Sources deliver a JSON array per endpoint. Each element is converted into
one of the dataclasses below; a record that cannot be converted raises
``ValidationError`` so the caller can skip it without dropping the batch.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from motosense.exceptions import ValidationError


def decode_payload(raw: str) -> list[dict[str, Any]]:
    """Decode a raw payload into a list of record dicts."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Payload is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise ValidationError("Payload must be a JSON array of records")
    return data


def parse_datetime(value: str) -> datetime:
    """Parse an ISO 8601 date or datetime. Naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError) as e:
        raise ValidationError(f"Invalid date: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _require(record: dict[str, Any], key: str) -> Any:
    if not isinstance(record, dict):
        raise ValidationError("Record must be an object")
    if key not in record or record[key] is None:
        raise ValidationError(f"Missing required field '{key}'", entity_id=record.get("id"))
    return record[key]


@dataclass
class RaceScheduleItem:
    """Race information from the schedule source."""

    id: str  # e.g. "sx-2025-r01"
    name: str
    series: str  # sx / mx
    round: int
    date: str  # ISO 8601
    track_id: str
    status: str  # upcoming / completed
    venue: str | None = None
    city: str | None = None
    state: str | None = None

    @property
    def starts_at(self) -> datetime:
        return parse_datetime(self.date)

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> "RaceScheduleItem":
        return cls(
            id=_require(record, "id"),
            name=_require(record, "name"),
            series=_require(record, "series"),
            round=_require(record, "round"),
            date=_require(record, "date"),
            track_id=_require(record, "trackId"),
            status=_require(record, "status"),
            venue=record.get("venue"),
            city=record.get("city"),
            state=record.get("state"),
        )


@dataclass
class RiderDataItem:
    """Rider information from the riders source."""

    id: str  # e.g. "jett-lawrence"
    first_name: str
    last_name: str
    number: int
    team: str
    series: str  # sx / mx / both
    nationality: str
    status: str  # active / injured / retired
    injury_details: str | None = None

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> "RiderDataItem":
        return cls(
            id=_require(record, "id"),
            first_name=_require(record, "firstName"),
            last_name=_require(record, "lastName"),
            number=_require(record, "number"),
            team=_require(record, "team"),
            series=_require(record, "series"),
            nationality=record.get("nationality") or "",
            status=_require(record, "status"),
            injury_details=record.get("injuryDetails"),
        )


@dataclass
class RaceResultItem:
    """One rider's result from the results source."""

    race_id: str
    rider_id: str
    position: int  # 1-22
    points: int  # championship points
    status: str  # finished / dnf / dns / dsq
    laps: int | None = None
    total_time: str | None = None
    best_lap_time: str | None = None
    gap: str | None = None

    @property
    def entity_id(self) -> str:
        return f"{self.race_id}-{self.rider_id}"

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> "RaceResultItem":
        return cls(
            race_id=_require(record, "raceId"),
            rider_id=_require(record, "riderId"),
            position=_require(record, "position"),
            points=_require(record, "points"),
            status=_require(record, "status"),
            laps=record.get("laps"),
            total_time=record.get("totalTime"),
            best_lap_time=record.get("bestLapTime"),
            gap=record.get("gap"),
        )


@dataclass
class RaceWithResults:
    """A race and its result rows."""

    race_id: str
    race_name: str
    date: str
    results: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> "RaceWithResults":
        results = record.get("results") if isinstance(record, dict) else None
        if results is not None and not isinstance(results, list):
            raise ValidationError("'results' must be an array", entity_id=record.get("raceId"))
        return cls(
            race_id=_require(record, "raceId"),
            race_name=record.get("raceName") or "",
            date=record.get("date") or "",
            results=results or [],
        )
