"""Round progression schemas."""

from motosense.schemas.common import BaseSchema
from motosense.schemas.race import RaceResponse


class RoundTransitionResponse(BaseSchema):
    """Result of a round transition."""

    action: str
    closed_race_id: str | None = None
    opened_race_id: str | None = None
    message: str


class CurrentRoundResponse(BaseSchema):
    """The open round of a season."""

    season_id: str
    race: RaceResponse | None = None
