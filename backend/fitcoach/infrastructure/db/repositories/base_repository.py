"""
Base Repository for FitCoach

Generic async repository for tables owned by a single user.
"""

from typing import TypeVar, Generic, List, Optional, Type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel


ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """
    Generic async repository with the CRUD operations shared by
    every per-user table.

    Args:
        model: The SQLModel class to operate on
        session: Async database session
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self._model = model
        self._session = session

    @property
    def session(self) -> AsyncSession:
        """Get the current session."""
        return self._session

    async def get_by_id(self, id: int) -> Optional[ModelType]:
        """
        Get a single record by its primary key.

        Returns:
            Model instance or None if not found
        """
        return await self._session.get(self._model, id)

    async def list_for_user(
        self,
        user_id: int,
        limit: int = 100,
        order_by=None,
    ) -> List[ModelType]:
        """
        Get a user's records, newest first by default.

        Args:
            user_id: Owning user
            limit: Maximum records to return
            order_by: Column expression to sort by (defaults to id desc)
        """
        stmt = (
            select(self._model)
            .where(self._model.user_id == user_id)
            .order_by(order_by if order_by is not None else self._model.id.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def add(self, db_obj: ModelType) -> ModelType:
        """Insert a record and return it with generated fields loaded."""
        self._session.add(db_obj)
        await self._session.flush()
        await self._session.refresh(db_obj)
        return db_obj
