from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db_handlers.base import BaseDBHandler, check_local_db
from app.models.daily_page import DailyPage
from app.utils.logger import setup_logger

logger = setup_logger("db_handlers.daily_page")

_DIALECT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class DailyPageDBHandler(BaseDBHandler[DailyPage]):
    def __init__(self):
        super().__init__(DailyPage)

    @check_local_db
    async def get_or_create(self, day: date, *, db: AsyncSession = None) -> DailyPage:
        """
        Return the page for `day`, creating it on first reference.

        The insert is an ON CONFLICT DO NOTHING upsert against the unique date
        constraint, so concurrent first callers all end up reading the same row.
        """
        existing = await self._get_by_date(day, db=db)
        if existing is not None:
            return existing

        dialect_name = db.get_bind().dialect.name
        insert = _DIALECT_INSERTS.get(dialect_name)
        if insert is None:
            raise RuntimeError(f"Unsupported database dialect: {dialect_name}")

        try:
            stmt = (
                insert(DailyPage)
                .values(id=uuid.uuid4(), date=day)
                .on_conflict_do_nothing(index_elements=["date"])
            )
            result = await db.execute(stmt)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error creating daily page for {day}: {e}", exc_info=True)
            raise

        if result.rowcount:
            logger.info(f"Created daily page for {day}")

        page = await self._get_by_date(day, db=db)
        if page is None:
            raise RuntimeError(f"Daily page for {day} missing after upsert")
        return page

    async def _get_by_date(self, day: date, *, db: AsyncSession) -> DailyPage | None:
        result = await db.execute(select(DailyPage).where(DailyPage.date == day))
        return result.scalar_one_or_none()
