"""Common schema types."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class RaceStatusEnum(str, Enum):
    """Race status enum for API."""

    UPCOMING = "upcoming"
    OPEN = "open"
    COMPLETED = "completed"


class SeriesEnum(str, Enum):
    """Race series enum."""

    SUPERCROSS = "supercross"
    MOTOCROSS = "motocross"
    CHAMPIONSHIP = "championship"


class ResultStatusEnum(str, Enum):
    """Finishing status enum."""

    FINISHED = "finished"
    DNF = "dnf"
    DNS = "dns"
    DSQ = "dsq"


class SyncKindEnum(str, Enum):
    """Sync endpoint kinds."""

    SCHEDULE = "schedule"
    RIDERS = "riders"
    RESULTS = "results"


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(from_attributes=True)


class TimestampSchema(BaseSchema):
    """Schema with timestamp fields."""

    created_at: datetime
    updated_at: datetime
