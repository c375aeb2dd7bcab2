"""Race schemas."""

from datetime import datetime

from pydantic import Field

from motosense.schemas.common import BaseSchema, TimestampSchema
from motosense.schemas.result import ResultResponse


class RaceResponse(TimestampSchema):
    """Race response schema."""

    id: str
    name: str
    series: str
    round: int
    date: datetime
    venue: str | None = None
    track_id: str | None = None
    season_id: str | None = None
    status: str
    is_simulation: bool
    has_results: bool
    opened_at: datetime | None = None
    closes_at: datetime | None = None
    results_revealed_at: datetime | None = None


class RaceListResponse(BaseSchema):
    """Race list response schema."""

    items: list[RaceResponse]
    total: int


class RaceDetailResponse(RaceResponse):
    """Race detail with its results once revealed."""

    holeshot_rider_id: str | None = None
    fastest_lap_rider_id: str | None = None
    results: list[ResultResponse] = Field(default_factory=list)
