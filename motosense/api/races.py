"""Race API routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from motosense.api.deps import require_sync_token
from motosense.database import get_db
from motosense.exceptions import NotFoundError
from motosense.fetchers import RaceResultItem
from motosense.models import RaceStatus
from motosense.repositories import RaceRepository, RiderRepository
from motosense.schemas import (
    RaceDetailResponse,
    RaceListResponse,
    RaceResponse,
    RaceStatusEnum,
    ResultResponse,
    ResultsCreate,
    ResultsEntryResponse,
    RiderResponse,
    SeriesEnum,
)
from motosense.services import ResultsService

router = APIRouter(prefix="/races", tags=["races"])
riders_router = APIRouter(prefix="/riders", tags=["riders"])


@router.get("", response_model=RaceListResponse)
async def get_races(
    season_id: str | None = None,
    series: SeriesEnum | None = None,
    status: RaceStatusEnum | None = None,
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    """List races ordered by date."""
    races = await RaceRepository(db).list_races(
        season_id=season_id,
        series=series.value if series else None,
        status=status.value if status else None,
        limit=limit,
    )
    items = [RaceResponse.model_validate(r) for r in races]
    return RaceListResponse(items=items, total=len(items))


@router.get("/{race_id}", response_model=RaceDetailResponse)
async def get_race(
    race_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Get a race. Simulation results stay hidden until the round is closed."""
    race = await RaceRepository(db).get(race_id)
    if race is None:
        raise NotFoundError("Race", race_id)

    detail = RaceDetailResponse(**RaceResponse.model_validate(race).model_dump())
    revealed = not race.is_simulation or race.status == RaceStatus.COMPLETED.value
    if race.has_results and revealed:
        results = await ResultsService(db).get_results(race_id)
        detail.results = [ResultResponse.model_validate(r) for r in results]
        detail.holeshot_rider_id = race.holeshot_rider_id
        detail.fastest_lap_rider_id = race.fastest_lap_rider_id
    return detail


@router.post(
    "/{race_id}/results",
    response_model=ResultsEntryResponse,
    dependencies=[Depends(require_sync_token)],
)
async def enter_results(
    race_id: str,
    request: ResultsCreate,
    db: AsyncSession = Depends(get_db),
):
    """Enter the finishing order of a race and score its predictions."""
    entries = [
        RaceResultItem(
            race_id=race_id,
            rider_id=r.rider_id,
            position=r.position,
            points=r.points,
            status=r.status.value,
            laps=r.laps,
            total_time=r.total_time,
            best_lap_time=r.best_lap_time,
            gap=r.gap,
        )
        for r in request.results
    ]
    scores = await ResultsService(db).enter_results(
        race_id,
        entries,
        holeshot_rider_id=request.holeshot_rider_id,
        fastest_lap_rider_id=request.fastest_lap_rider_id,
    )
    return ResultsEntryResponse(race_id=race_id, results_count=len(entries), scored_predictions=len(scores))


@router.delete("/{race_id}/results", dependencies=[Depends(require_sync_token)])
async def delete_results(
    race_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Remove a race's results and the scores derived from them."""
    deleted = await ResultsService(db).delete_results(race_id)
    return {"race_id": race_id, "deleted": deleted}


@riders_router.get("", response_model=list[RiderResponse])
async def get_riders(
    status: str | None = None,
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    """List riders."""
    repo = RiderRepository(db)
    if status:
        return await repo.get_by_status(status)
    return await repo.get_all(limit=limit)
