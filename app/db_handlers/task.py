from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from app.db_handlers.base import BaseDBHandler, check_local_db
from app.models.task import Task
from app.utils.logger import setup_logger

logger = setup_logger("task_db_handler")


class TaskDBHandler(BaseDBHandler[Task]):
    def __init__(self):
        super().__init__(Task)

    @check_local_db
    async def get_tasks_for_page(
        self, page_id: uuid.UUID, user_id: uuid.UUID, *, db: AsyncSession = None
    ) -> list[Task]:
        """A user's tasks on one page, oldest first, with owners loaded."""
        return await self.get_multi_by_attributes(
            db=db,
            daily_page_id=page_id,
            user_id=user_id,
            order_by=[Task.created_at.asc()],
            options=[selectinload(Task.user)],
        )

    @check_local_db
    async def get_task_with_owner(
        self, task_id: uuid.UUID, *, db: AsyncSession = None
    ) -> Task | None:
        """Get a task with its owner relationship loaded."""
        stmt = (
            select(Task)
            .where(Task.id == task_id)
            .options(selectinload(Task.user))
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @check_local_db
    async def get_incomplete_tasks_for_page(
        self, page_id: uuid.UUID, *, db: AsyncSession = None
    ) -> list[Task]:
        """All unfinished tasks of a page, across every user."""
        try:
            stmt = (
                select(Task)
                .where(Task.daily_page_id == page_id, Task.is_completed.is_(False))
                .order_by(Task.created_at)
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving incomplete tasks of page {page_id}: {e}")
            raise

    @check_local_db
    async def update_task(
        self,
        task: Task,
        update_data: dict[str, Any],
        *,
        completed_at=None,
        db: AsyncSession = None,
    ) -> Task:
        """
        Apply a partial update of title, description and completion flag.

        When `is_completed` is present, `completed_at` is set to the given
        instant or cleared, whatever its previous value was.
        """
        changes = {
            key: value
            for key, value in update_data.items()
            if key in ("title", "description")
        }
        if "is_completed" in update_data:
            is_completed = bool(update_data["is_completed"])
            changes["is_completed"] = is_completed
            changes["completed_at"] = completed_at if is_completed else None

        updated = await self.update(task, changes, db=db)
        return await self.get_task_with_owner(updated.id, db=db)
