"""Sync schemas."""

from datetime import datetime
from typing import Any

from motosense.schemas.common import BaseSchema


class DataChangeResponse(BaseSchema):
    """One detected change."""

    entity_type: str
    entity_id: str
    change_type: str
    significance: str
    field_name: str | None = None
    old_value: str | None = None
    new_value: str | None = None


class SyncResultResponse(BaseSchema):
    """Outcome of a sync run."""

    success: bool
    records_fetched: int
    records_inserted: int
    records_updated: int
    records_deleted: int
    records_invalid: int
    changes: list[DataChangeResponse]
    error: str | None = None
    sync_id: int | None = None
    content_changed: bool


class SyncEnvelope(BaseSchema):
    """Response body of the sync endpoints."""

    success: bool
    data: SyncResultResponse
    timestamp: datetime


class ErrorResponse(BaseSchema):
    """Error body rendered for domain errors."""

    error: str
    code: str
    timestamp: datetime
    details: dict[str, Any] | None = None


class SyncHistoryResponse(BaseSchema):
    """One sync run."""

    id: int
    source_id: str
    sync_type: str
    status: str
    started_at: datetime
    completed_at: datetime | None = None
    duration_ms: int | None = None
    records_fetched: int
    records_inserted: int
    records_updated: int
    records_deleted: int
    records_invalid: int
    error_message: str | None = None
