"""User profile, achievement and leaderboard routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from motosense.database import get_db
from motosense.exceptions import NotFoundError
from motosense.repositories import ProfileRepository
from motosense.schemas import AchievementResponse, LeaderboardEntry, ProfileResponse
from motosense.services import AchievementService, ResultsService

router = APIRouter(prefix="/users", tags=["users"])
leaderboard_router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("/{user_id}/profile", response_model=ProfileResponse)
async def get_profile(
    user_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Get a user's aggregate stats."""
    profile = await ProfileRepository(db).get(user_id)
    if profile is None:
        raise NotFoundError("Profile", user_id)
    return profile


@router.get("/{user_id}/achievements", response_model=list[AchievementResponse])
async def get_achievements(
    user_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Full achievement catalog with the user's progress."""
    entries = await AchievementService(db).get_user_achievements(user_id)
    return [
        AchievementResponse(
            id=a.id,
            title=a.title,
            description=a.description,
            category=a.category,
            tier=a.tier,
            target=a.target,
            reward_points=a.reward_points,
            progress=row.progress if row else 0,
            is_unlocked=bool(row and row.is_unlocked),
            unlocked_at=row.unlocked_at if row else None,
        )
        for a, row in entries
    ]


@leaderboard_router.get("", response_model=list[LeaderboardEntry])
async def get_leaderboard(
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    """Users ranked by total points."""
    profiles = await ResultsService(db).get_leaderboard(limit)
    return [
        LeaderboardEntry(
            rank=rank,
            user_id=p.user_id,
            username=p.username,
            total_points=p.total_points,
            accuracy=p.accuracy,
            total_predictions=p.total_predictions,
            perfect_predictions=p.perfect_predictions,
        )
        for rank, p in enumerate(profiles, start=1)
    ]
