"""User repository for data access."""

from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import User
from repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User entity."""

    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def get_by_username(self, username: str) -> Optional[User]:
        stmt = select(User).where(User.username == username)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def exists_with(self, username: str, email: str) -> bool:
        """True if either the username or the email is already taken."""
        stmt = select(User.id).where(or_(User.username == username, User.email == email)).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None
