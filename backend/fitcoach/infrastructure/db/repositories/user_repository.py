"""
User Repository for FitCoach

Account lookups and creation for the auth routes.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.infrastructure.db.models.user import User
from fitcoach.infrastructure.db.repositories.base_repository import BaseRepository
from fitcoach.infrastructure.exceptions import DuplicateError


class UserRepository(BaseRepository[User]):

    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def get_by_username(self, username: str) -> Optional[User]:
        stmt = select(User).where(User.username == username)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(
        self,
        username: str,
        password_hash: str,
        email: Optional[str] = None,
    ) -> User:
        """
        Create a user.

        Raises:
            DuplicateError: username or email already taken
        """
        user = User(username=username, password_hash=password_hash, email=email)
        try:
            return await self.add(user)
        except IntegrityError as e:
            raise DuplicateError(
                "Username already exists",
                operation="insert",
                table="users",
                original_error=e,
            )
