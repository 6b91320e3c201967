from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db_handlers.base import BaseDBHandler, check_local_db
from app.models.access_token import AccessToken
from app.utils.auth import create_access_token
from app.utils.logger import setup_logger

logger = setup_logger("db_handlers.access_token")


class AccessTokenDBHandler(BaseDBHandler[AccessToken]):
    def __init__(self):
        super().__init__(AccessToken)

    @check_local_db
    async def issue_token(
        self, user_id: uuid.UUID, name: str = "auth_token", *, db: AsyncSession = None
    ) -> str:
        """Persist a new token row and return the signed bearer token for it."""
        token_row = await self.create({"user_id": user_id, "name": name}, db=db)
        return create_access_token(
            data={"sub": str(user_id), "jti": str(token_row.id)}
        )

    @check_local_db
    async def get_active_token(
        self, token_id: uuid.UUID, user_id: uuid.UUID, *, db: AsyncSession = None
    ) -> AccessToken | None:
        """Load a live token row together with its user, touching last_used_at."""
        stmt = (
            select(AccessToken)
            .where(AccessToken.id == token_id, AccessToken.user_id == user_id)
            .options(selectinload(AccessToken.user))
        )
        result = await db.execute(stmt)
        token_row = result.scalar_one_or_none()
        if token_row is not None:
            token_row.last_used_at = datetime.now(UTC)
            await db.commit()
        return token_row

    @check_local_db
    async def revoke(self, token_id: uuid.UUID, *, db: AsyncSession = None) -> bool:
        """Delete exactly one token. Returns False if it was already gone."""
        result = await db.execute(delete(AccessToken).where(AccessToken.id == token_id))
        await db.commit()
        return result.rowcount > 0
