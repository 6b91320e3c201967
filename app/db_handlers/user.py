from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db_handlers.base import BaseDBHandler, check_local_db
from app.models.user import User
from app.utils.logger import setup_logger

logger = setup_logger("db_handlers.user")


class UserDBHandler(BaseDBHandler[User]):
    def __init__(self):
        super().__init__(User)

    @check_local_db
    async def get_user_by_email(
        self, email: str, *, db: AsyncSession = None
    ) -> User | None:
        """Get a user by email address."""
        try:
            stmt = select(User).filter(User.email == email)
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving user by email '{email}': {e}")
            raise

    @check_local_db
    async def find_conflicts(
        self, username: str, email: str, *, db: AsyncSession = None
    ) -> set[str]:
        """Return which of 'username' and 'email' are already registered."""
        stmt = select(User.username, User.email).where(
            or_(User.username == username, User.email == email)
        )
        result = await db.execute(stmt)
        conflicts = set()
        for existing_username, existing_email in result.all():
            if existing_username == username:
                conflicts.add("username")
            if existing_email == email:
                conflicts.add("email")
        return conflicts
