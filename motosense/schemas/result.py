"""Race result schemas."""

from pydantic import Field, model_validator

from motosense.schemas.common import BaseSchema, ResultStatusEnum


class ResultEntry(BaseSchema):
    """One finishing position entered by an admin."""

    rider_id: str = Field(..., min_length=1, max_length=50)
    position: int = Field(..., ge=1, le=22)
    points: int = Field(0, ge=0, le=26, description="Championship points")
    laps: int | None = Field(None, ge=0)
    status: ResultStatusEnum = ResultStatusEnum.FINISHED
    total_time: str | None = Field(None, max_length=20)
    best_lap_time: str | None = Field(None, max_length=20)
    gap: str | None = Field(None, max_length=20)


class ResultsCreate(BaseSchema):
    """Finishing order of a race."""

    results: list[ResultEntry] = Field(..., min_length=5)
    holeshot_rider_id: str | None = None
    fastest_lap_rider_id: str | None = None

    @model_validator(mode="after")
    def check_unique(self):
        riders = [r.rider_id for r in self.results]
        if len(set(riders)) != len(riders):
            raise ValueError("A rider can only appear once in the results")
        positions = [r.position for r in self.results]
        if len(set(positions)) != len(positions):
            raise ValueError("Positions must be unique")
        return self


class ResultResponse(BaseSchema):
    """Result response schema."""

    rider_id: str
    position: int
    points: int
    laps: int | None = None
    status: str
    total_time: str | None = None
    best_lap_time: str | None = None
    gap: str | None = None


class ResultsEntryResponse(BaseSchema):
    """Outcome of entering results."""

    race_id: str
    results_count: int
    scored_predictions: int
