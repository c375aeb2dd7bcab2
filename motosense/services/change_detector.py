"""Field-level change detection between stored rows and fetched records."""

import hashlib
from dataclasses import dataclass
from typing import Any

from motosense.fetchers.payloads import RaceResultItem, RaceScheduleItem, RiderDataItem
from motosense.models import ChangeType, Race, RaceResult, Rider, Significance

SERIES_NAMES = {"sx": "supercross", "mx": "motocross"}


@dataclass(frozen=True)
class DetectedChange:
    """A single change to be written to the change log."""

    entity_type: str  # race / rider / result
    entity_id: str
    change_type: str
    significance: str
    field_name: str | None = None
    old_value: str | None = None
    new_value: str | None = None

    @property
    def is_critical(self) -> bool:
        return self.significance == Significance.CRITICAL.value


def hash_content(raw: str | bytes) -> str:
    """SHA-256 hex digest of a payload."""
    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    return hashlib.sha256(raw).hexdigest()


def _text(value: Any) -> str | None:
    if value is None:
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def _change(
    entity_type: str,
    entity_id: str,
    field_name: str,
    old: Any,
    new: Any,
    significance: Significance,
    change_type: ChangeType = ChangeType.UPDATED,
) -> DetectedChange:
    return DetectedChange(
        entity_type=entity_type,
        entity_id=entity_id,
        change_type=change_type.value,
        significance=significance.value,
        field_name=field_name,
        old_value=_text(old),
        new_value=_text(new),
    )


def created_change(entity_type: str, entity_id: str, summary: str | None = None) -> DetectedChange:
    """Change record for a newly inserted entity."""
    significance = Significance.MEDIUM if entity_type == "race" else Significance.LOW
    return DetectedChange(
        entity_type=entity_type,
        entity_id=entity_id,
        change_type=ChangeType.CREATED.value,
        significance=significance.value,
        new_value=summary,
    )


def detect_race_changes(race: Race, item: RaceScheduleItem) -> list[DetectedChange]:
    """Compare a stored race with its schedule record.

    A moved start time is reported as ``rescheduled``. Status is only
    compared for non-simulation races; simulation rounds are driven by the
    round state machine, not by the feed.
    """
    changes = []
    starts_at = item.starts_at
    if race.date != starts_at:
        changes.append(
            _change("race", race.id, "date", race.date, starts_at,
                    Significance.CRITICAL, ChangeType.RESCHEDULED)
        )
    if item.venue is not None and race.venue != item.venue:
        changes.append(_change("race", race.id, "venue", race.venue, item.venue, Significance.HIGH))
    if race.track_id != item.track_id:
        changes.append(_change("race", race.id, "track_id", race.track_id, item.track_id, Significance.HIGH))
    if race.name != item.name:
        changes.append(_change("race", race.id, "name", race.name, item.name, Significance.MEDIUM))
    if not race.is_simulation and race.status != item.status:
        changes.append(_change("race", race.id, "status", race.status, item.status, Significance.MEDIUM))
    return changes


def detect_rider_changes(rider: Rider, item: RiderDataItem) -> list[DetectedChange]:
    """Compare a stored rider with its roster record."""
    changes = []
    if rider.status != item.status:
        changes.append(_change("rider", rider.id, "status", rider.status, item.status, Significance.CRITICAL))
    if rider.team != item.team:
        changes.append(_change("rider", rider.id, "team", rider.team, item.team, Significance.HIGH))
    if rider.number != item.number:
        changes.append(_change("rider", rider.id, "number", rider.number, item.number, Significance.MEDIUM))
    if (rider.injury_details or None) != (item.injury_details or None):
        changes.append(
            _change("rider", rider.id, "injury_details", rider.injury_details, item.injury_details, Significance.HIGH)
        )
    if rider.name != item.name:
        changes.append(_change("rider", rider.id, "name", rider.name, item.name, Significance.LOW))
    return changes


def detect_result_changes(result: RaceResult, item: RaceResultItem) -> list[DetectedChange]:
    """Compare a stored result row with a fetched one."""
    entity_id = item.entity_id
    changes = []
    if result.status != item.status:
        changes.append(_change("result", entity_id, "status", result.status, item.status, Significance.CRITICAL))
    if result.position != item.position:
        changes.append(_change("result", entity_id, "position", result.position, item.position, Significance.HIGH))
    if result.points != item.points:
        changes.append(_change("result", entity_id, "points", result.points, item.points, Significance.HIGH))
    if item.total_time is not None and result.total_time != item.total_time:
        changes.append(
            _change("result", entity_id, "total_time", result.total_time, item.total_time, Significance.LOW)
        )
    return changes


def results_posted_change(race_id: str) -> DetectedChange:
    """Critical change emitted when a race receives its first results."""
    return _change("race", race_id, "has_results", False, True, Significance.CRITICAL)
