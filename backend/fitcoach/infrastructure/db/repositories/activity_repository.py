"""
Activity Repositories for FitCoach

Workout sessions and progress logs. Both are append-only per user.
"""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.infrastructure.db.models.progress_log import ProgressLogModel
from fitcoach.infrastructure.db.models.workout_session import WorkoutSessionModel
from fitcoach.infrastructure.db.repositories.base_repository import BaseRepository


class WorkoutRepository(BaseRepository[WorkoutSessionModel]):

    DEFAULT_LIMIT = 20

    def __init__(self, session: AsyncSession):
        super().__init__(WorkoutSessionModel, session)

    async def get_recent(self, user_id: int, limit: int = DEFAULT_LIMIT) -> List[WorkoutSessionModel]:
        """Newest workouts first."""
        return await self.list_for_user(
            user_id,
            limit=limit,
            order_by=WorkoutSessionModel.date.desc(),
        )


class ProgressRepository(BaseRepository[ProgressLogModel]):

    DEFAULT_LIMIT = 30

    def __init__(self, session: AsyncSession):
        super().__init__(ProgressLogModel, session)

    async def get_recent(self, user_id: int, limit: int = DEFAULT_LIMIT) -> List[ProgressLogModel]:
        """Newest logs first."""
        return await self.list_for_user(
            user_id,
            limit=limit,
            order_by=ProgressLogModel.date.desc(),
        )

    async def get_latest(self, user_id: int) -> Optional[ProgressLogModel]:
        logs = await self.get_recent(user_id, limit=1)
        return logs[0] if logs else None
