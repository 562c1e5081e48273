"""
Profile Repository for FitCoach

Upserts for the per-user profile and coach persona rows.
"""

from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.infrastructure.db.models.base import utcnow
from fitcoach.infrastructure.db.models.coach_persona import CoachPersonaModel
from fitcoach.infrastructure.db.models.profile import UserProfile
from fitcoach.infrastructure.db.repositories.base_repository import BaseRepository


class UserProfileRepository(BaseRepository[UserProfile]):
    """
    Repository for UserProfile reads and upserts.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(UserProfile, session)

    async def get_by_user_id(self, user_id: int) -> Optional[UserProfile]:
        """
        Get a profile by the owning user's id (not the profile id).
        """
        stmt = select(UserProfile).where(UserProfile.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(self, user_id: int, data: Dict[str, Any]) -> UserProfile:
        """
        Create the profile or update the given fields in place.

        Args:
            user_id: Owning user
            data: Column values to set (unset fields are left untouched)
        """
        profile = await self.get_by_user_id(user_id)
        if profile is None:
            profile = UserProfile(user_id=user_id)

        for field, value in data.items():
            setattr(profile, field, value)
        profile.updated_at = utcnow()

        return await self.add(profile)


class CoachPersonaRepository(BaseRepository[CoachPersonaModel]):

    def __init__(self, session: AsyncSession):
        super().__init__(CoachPersonaModel, session)

    async def get_by_user_id(self, user_id: int) -> Optional[CoachPersonaModel]:
        stmt = select(CoachPersonaModel).where(CoachPersonaModel.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(self, user_id: int, data: Dict[str, Any]) -> CoachPersonaModel:
        """Create the persona with defaults or update the given fields."""
        persona = await self.get_by_user_id(user_id)
        if persona is None:
            persona = CoachPersonaModel(user_id=user_id)

        for field, value in data.items():
            if value is not None:
                setattr(persona, field, value)
        persona.updated_at = utcnow()

        return await self.add(persona)
