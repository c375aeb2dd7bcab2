"""Per-record validation of fetched data.

Each ``validate_*`` function raises ``ValidationError`` listing every
problem with the record, and returns non-fatal warnings otherwise.
"""

from motosense.exceptions import ValidationError
from motosense.fetchers.payloads import RaceResultItem, RaceScheduleItem, RiderDataItem, parse_datetime

RACE_SERIES = ("sx", "mx")
RACE_STATUSES = ("upcoming", "completed")
MAX_ROUND = 20

RIDER_SERIES = ("sx", "mx", "both")
RIDER_STATUSES = ("active", "injured", "retired")
MAX_RIDER_NUMBER = 999

RESULT_STATUSES = ("finished", "dnf", "dns", "dsq")
MAX_POSITION = 22
MAX_POINTS = 26


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _blank(value) -> bool:
    return not isinstance(value, str) or not value.strip()


def _raise_if(errors: list[str], entity_id: str | None) -> None:
    if errors:
        raise ValidationError("; ".join(errors), entity_id=entity_id)


def validate_race_item(item: RaceScheduleItem) -> list[str]:
    """Validate a schedule record."""
    errors = []
    for field_name in ("id", "name", "date"):
        if _blank(getattr(item, field_name)):
            errors.append(f"{field_name} is required")
    if not _blank(item.date):
        try:
            parse_datetime(item.date)
        except ValidationError:
            errors.append(f"invalid date {item.date!r}")
    if item.series not in RACE_SERIES:
        errors.append(f"invalid series {item.series!r}")
    if not _is_int(item.round) or not 1 <= item.round <= MAX_ROUND:
        errors.append(f"round must be between 1 and {MAX_ROUND}")
    if item.status not in RACE_STATUSES:
        errors.append(f"invalid status {item.status!r}")

    _raise_if(errors, item.id)
    return []


def validate_rider_item(item: RiderDataItem) -> list[str]:
    """Validate a roster record. An injured rider without details is only a warning."""
    errors = []
    warnings = []
    for field_name in ("id", "first_name", "last_name", "team"):
        if _blank(getattr(item, field_name)):
            errors.append(f"{field_name} is required")
    if not _is_int(item.number) or not 1 <= item.number <= MAX_RIDER_NUMBER:
        errors.append(f"number must be between 1 and {MAX_RIDER_NUMBER}")
    if item.series not in RIDER_SERIES:
        errors.append(f"invalid series {item.series!r}")
    if item.status not in RIDER_STATUSES:
        errors.append(f"invalid status {item.status!r}")
    if item.status == "injured" and not item.injury_details:
        warnings.append(f"rider {item.id} is injured but has no injury details")

    _raise_if(errors, item.id)
    return warnings


def validate_result_item(item: RaceResultItem) -> list[str]:
    """Validate one result row. Finished riders must have completed a lap."""
    errors = []
    if _blank(item.race_id) or _blank(item.rider_id):
        errors.append("race_id and rider_id are required")
    if not _is_int(item.position) or not 1 <= item.position <= MAX_POSITION:
        errors.append(f"position must be between 1 and {MAX_POSITION}")
    if not _is_int(item.points) or not 0 <= item.points <= MAX_POINTS:
        errors.append(f"points must be between 0 and {MAX_POINTS}")
    if item.status not in RESULT_STATUSES:
        errors.append(f"invalid status {item.status!r}")
    elif item.status == "finished" and (not _is_int(item.laps) or item.laps < 1):
        errors.append("finished result must have at least one lap")

    _raise_if(errors, item.entity_id)
    return []
