"""
Plan Repositories for FitCoach

A user has at most one active plan of each kind. Saving a new plan
deactivates the previous ones in the same transaction.
"""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.infrastructure.db.models.plan import NutritionPlanModel, TrainingPlanModel
from fitcoach.infrastructure.db.repositories.base_repository import BaseRepository


class _ActivePlanRepository(BaseRepository):

    async def get_active(self, user_id: int):
        stmt = (
            select(self._model)
            .where(self._model.user_id == user_id)
            .where(self._model.is_active.is_(True))
            .order_by(self._model.id.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def replace_active(self, plan):
        """Deactivate the user's current plans and store `plan` as active."""
        await self.session.execute(
            update(self._model)
            .where(self._model.user_id == plan.user_id)
            .where(self._model.is_active.is_(True))
            .values(is_active=False)
        )
        plan.is_active = True
        return await self.add(plan)


class TrainingPlanRepository(_ActivePlanRepository):

    def __init__(self, session: AsyncSession):
        super().__init__(TrainingPlanModel, session)

    async def get_active(self, user_id: int) -> Optional[TrainingPlanModel]:
        return await super().get_active(user_id)


class NutritionPlanRepository(_ActivePlanRepository):

    def __init__(self, session: AsyncSession):
        super().__init__(NutritionPlanModel, session)

    async def get_active(self, user_id: int) -> Optional[NutritionPlanModel]:
        return await super().get_active(user_id)
