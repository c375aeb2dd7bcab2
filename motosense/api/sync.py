"""Data sync API routes."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from motosense.api.deps import error_body, get_fetcher, require_sync_token
from motosense.database import get_db
from motosense.fetchers import DataFetcher
from motosense.repositories import SyncHistoryRepository
from motosense.schemas import SyncEnvelope, SyncHistoryResponse, SyncKindEnum, SyncResultResponse
from motosense.services import SYNC_KINDS

router = APIRouter(prefix="/sync", tags=["sync"])


@router.post(
    "/{kind}",
    response_model=SyncEnvelope,
    dependencies=[Depends(require_sync_token)],
)
async def run_sync(
    kind: SyncKindEnum,
    sync_type: str = Query("manual", pattern="^(manual|scheduled|triggered)$"),
    db: AsyncSession = Depends(get_db),
    fetcher: DataFetcher = Depends(get_fetcher),
):
    """Sync one source. A failed run answers 500 but its history is kept."""
    orchestrator = SYNC_KINDS[kind.value](db, fetcher)
    result = await orchestrator.sync(sync_type=sync_type)

    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(result.error or "Sync failed", "SYNC_FAILED"),
        )

    return SyncEnvelope(
        success=True,
        data=SyncResultResponse.model_validate(result),
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/history", response_model=list[SyncHistoryResponse])
async def get_sync_history(
    source_id: str | None = None,
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Latest sync runs."""
    return await SyncHistoryRepository(db).get_recent(source_id=source_id, limit=limit)
