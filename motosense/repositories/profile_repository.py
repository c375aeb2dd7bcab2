"""User profile and achievement repositories."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from motosense.models import UserAchievement, UserProfile
from motosense.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[UserProfile]):
    """Repository for UserProfile model."""

    def __init__(self, session: AsyncSession):
        super().__init__(UserProfile, session)

    async def get(self, id: str) -> UserProfile | None:
        """Get a profile by user ID."""
        return await self.session.get(UserProfile, id)

    async def get_or_create(self, user_id: str) -> UserProfile:
        """Get the profile, creating an empty one on first use."""
        profile = await self.get(user_id)
        if profile is None:
            profile = UserProfile(user_id=user_id)
            self.session.add(profile)
            await self.session.flush()
        return profile

    async def get_leaderboard(self, limit: int = 50) -> list[UserProfile]:
        """Profiles ordered by total points."""
        result = await self.session.execute(
            select(UserProfile)
            .order_by(UserProfile.total_points.desc(), UserProfile.accuracy.desc(), UserProfile.user_id)
            .limit(limit)
        )
        return list(result.scalars().all())


class UserAchievementRepository(BaseRepository[UserAchievement]):
    """Repository for UserAchievement model."""

    def __init__(self, session: AsyncSession):
        super().__init__(UserAchievement, session)

    async def get_by_user(self, user_id: str) -> dict[str, UserAchievement]:
        """Achievement progress keyed by achievement ID."""
        result = await self.session.execute(
            select(UserAchievement).where(UserAchievement.user_id == user_id)
        )
        return {ua.achievement_id: ua for ua in result.scalars().all()}

    async def get_or_create(self, user_id: str, achievement_id: str) -> UserAchievement:
        result = await self.session.execute(
            select(UserAchievement).where(
                UserAchievement.user_id == user_id,
                UserAchievement.achievement_id == achievement_id,
            )
        )
        progress = result.scalar_one_or_none()
        if progress is None:
            progress = UserAchievement(user_id=user_id, achievement_id=achievement_id)
            self.session.add(progress)
            await self.session.flush()
        return progress
