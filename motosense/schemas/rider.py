"""Rider schemas."""

from motosense.schemas.common import TimestampSchema


class RiderResponse(TimestampSchema):
    """Rider response schema."""

    id: str
    first_name: str
    last_name: str
    number: int
    team: str
    series: str
    nationality: str | None = None
    status: str
    injury_details: str | None = None
