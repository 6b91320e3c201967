import uuid

from fastapi import Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_app_db
from app.db_handlers.task import TaskDBHandler
from app.dependencies.auth import get_current_user
from app.exceptions import Forbidden, NotFound
from app.models import Task, User
from app.utils.logger import setup_logger

logger = setup_logger("dependencies.tasks")


def is_task_owner(task: Task, user: User) -> bool:
    """Authorization predicate: only the owner may modify a task."""
    return task.user_id == user.id


async def get_task_or_404(
    task_id: str = Path(..., description="The ID of the task"),
    db: AsyncSession = Depends(get_app_db),
    current_user: User = Depends(get_current_user),
) -> Task:
    """
    Dependency to load a task with its owner for any authenticated user.

    Raises NotFound if the id is not a UUID or no such task exists.
    """
    try:
        task_uuid = uuid.UUID(task_id)
    except ValueError as e:
        raise NotFound("Task not found") from e

    task = await TaskDBHandler().get_task_with_owner(task_uuid, db=db)
    if not task:
        raise NotFound("Task not found")
    return task


def require_owned_task(action: str):
    """
    Build a dependency that loads a task and checks ownership before `action`.

    The check runs before the route body, so no mutation is ever attempted on
    a task the caller does not own.
    """

    async def dependency(
        task: Task = Depends(get_task_or_404),
        current_user: User = Depends(get_current_user),
    ) -> Task:
        if not is_task_owner(task, current_user):
            logger.warning(
                f"User {current_user.id} tried to {action} task {task.id} owned by {task.user_id}"
            )
            raise Forbidden(f"Not authorized to {action} this task")
        return task

    return dependency
