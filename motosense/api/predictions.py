"""Prediction API routes."""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from motosense.database import get_db
from motosense.schemas import (
    PredictionCreate,
    PredictionHistoryListResponse,
    PredictionHistoryResponse,
    PredictionResponse,
    ScoreResponse,
)
from motosense.services import PredictionService

router = APIRouter(prefix="/predictions", tags=["predictions"])


@router.post("", response_model=PredictionResponse, status_code=status.HTTP_201_CREATED)
async def submit_prediction(
    request: PredictionCreate,
    db: AsyncSession = Depends(get_db),
):
    """Submit a top-5 prediction for a race."""
    service = PredictionService(db)
    return await service.submit_prediction(
        user_id=request.user_id,
        race_id=request.race_id,
        picks=request.picks,
        confidence_level=request.confidence_level,
        holeshot_rider_id=request.holeshot_rider_id,
        fastest_lap_rider_id=request.fastest_lap_rider_id,
    )


@router.get("/user/{user_id}", response_model=PredictionHistoryListResponse)
async def get_user_predictions(
    user_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Get a user's predictions with race and score."""
    service = PredictionService(db)
    predictions = await service.get_user_predictions(user_id)

    items = [
        PredictionHistoryResponse(
            id=p.id,
            user_id=p.user_id,
            race_id=p.race_id,
            picks=p.picks,
            confidence_level=p.confidence_level,
            holeshot_rider_id=p.holeshot_rider_id,
            fastest_lap_rider_id=p.fastest_lap_rider_id,
            submitted_at=p.submitted_at,
            race_name=p.race.name,
            race_date=p.race.date,
            score=ScoreResponse.model_validate(p.score) if p.score else None,
        )
        for p in predictions
    ]
    return PredictionHistoryListResponse(items=items, total=len(items))


@router.get("/{race_id}", response_model=PredictionResponse)
async def get_prediction(
    race_id: str,
    user_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
):
    """Get a user's prediction for a race."""
    service = PredictionService(db)
    return await service.get_prediction(user_id, race_id)


@router.get("/{race_id}/score", response_model=ScoreResponse)
async def get_prediction_score(
    race_id: str,
    user_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
):
    """Get the score of a user's prediction once results are in."""
    service = PredictionService(db)
    return await service.get_score(user_id, race_id)


@router.delete("/{race_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_prediction(
    race_id: str,
    user_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
):
    """Reset a user's prediction for a race."""
    service = PredictionService(db)
    await service.delete_prediction(user_id, race_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
