"""
Rollover: carry yesterday's unfinished tasks over to today.

Every incomplete task on yesterday's page (for all users) is copied into
today's page as a fresh, uncompleted task with the same owner, title and
description. The originals are left exactly as they were. All copies are
written in one transaction, so readers of today's page see either every copy
or none of them.

Repeated calls copy the same incomplete tasks again; nothing records that a
pair of days has already been rolled over.
"""

from dataclasses import dataclass
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from app.db_handlers import DailyPageDBHandler, TaskDBHandler, check_local_db
from app.utils.clock import Clock
from app.utils.logger import setup_logger

logger = setup_logger("rollover_service")


@dataclass(frozen=True)
class RolloverResult:
    source_date: date
    target_date: date
    moved: int


class RolloverService:
    def __init__(
        self,
        page_handler: DailyPageDBHandler | None = None,
        task_handler: TaskDBHandler | None = None,
    ):
        self.page_handler = page_handler or DailyPageDBHandler()
        self.task_handler = task_handler or TaskDBHandler()

    async def rollover(self, clock: Clock) -> RolloverResult:
        source_date = clock.yesterday()
        target_date = clock.today()

        source_page = await self.page_handler.get_or_create(source_date)
        target_page = await self.page_handler.get_or_create(target_date)

        moved = await self._copy_incomplete(source_page.id, target_page.id)

        logger.info(
            f"Rolled over {moved} incomplete tasks from {source_date} to {target_date}"
        )
        return RolloverResult(
            source_date=source_date, target_date=target_date, moved=moved
        )

    @check_local_db
    async def _copy_incomplete(
        self, source_page_id, target_page_id, *, db: AsyncSession = None
    ) -> int:
        incomplete = await self.task_handler.get_incomplete_tasks_for_page(
            source_page_id, db=db
        )
        copies = [self._copy_of(task, target_page_id) for task in incomplete]
        await self.task_handler.batch_create(copies, db=db)
        return len(copies)

    @staticmethod
    def _copy_of(task, target_page_id) -> dict:
        return {
            "daily_page_id": target_page_id,
            "user_id": task.user_id,
            "title": task.title,
            "description": task.description,
            "is_completed": False,
            "completed_at": None,
        }
