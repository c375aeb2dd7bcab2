"""Round progression API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from motosense.api.deps import require_sync_token
from motosense.database import get_db
from motosense.exceptions import NoMoreRounds
from motosense.schemas import CurrentRoundResponse, RaceResponse, RoundTransitionResponse
from motosense.services import RoundService

router = APIRouter(prefix="/rounds", tags=["rounds"])


@router.get("/{season_id}/current", response_model=CurrentRoundResponse)
async def get_current_round(
    season_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Get the open round of a season."""
    race = await RoundService(db).current_round(season_id)
    return CurrentRoundResponse(
        season_id=season_id,
        race=RaceResponse.model_validate(race) if race else None,
    )


@router.post(
    "/{season_id}/progress",
    response_model=RoundTransitionResponse,
    dependencies=[Depends(require_sync_token)],
)
async def progress_round(
    season_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Close the open round and open the next one."""
    try:
        return await RoundService(db).progress(season_id)
    except NoMoreRounds as e:
        # the last round stays closed
        if e.closed_race_id:
            await db.commit()
        raise


@router.post(
    "/{season_id}/digress",
    response_model=RoundTransitionResponse,
    dependencies=[Depends(require_sync_token)],
)
async def digress_round(
    season_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Reopen the previous round."""
    return await RoundService(db).digress(season_id)


@router.post(
    "/{season_id}/reset",
    response_model=RoundTransitionResponse,
    dependencies=[Depends(require_sync_token)],
)
async def reset_rounds(
    season_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Put every simulation race of the season back to upcoming."""
    return await RoundService(db).reset(season_id)


@router.post(
    "/{season_id}/auto-progress",
    response_model=RoundTransitionResponse,
    dependencies=[Depends(require_sync_token)],
)
async def auto_progress_round(
    season_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Progress if the open round's window has expired."""
    return await RoundService(db).auto_progress(season_id)
