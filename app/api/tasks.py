"""
Task API Routes - daily task lists, task CRUD and rollover.

Tasks are filed under the daily page of the day they were created. Listing is
scoped to the caller's own tasks; update and delete require ownership.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db import get_app_db
from app.db_handlers import DailyPageDBHandler, TaskDBHandler
from app.dependencies.auth import get_current_user
from app.dependencies.tasks import get_task_or_404, require_owned_task
from app.exceptions import ValidationError
from app.models import Task, User
from app.schemas import (
    CreateTaskRequest,
    DailyTasksResponse,
    MessageResponse,
    RolloverResponse,
    TaskResponse,
    UpdateTaskRequest,
)
from app.services.rollover_service import RolloverService
from app.utils.clock import Clock, get_clock
from app.utils.logger import setup_logger

logger = setup_logger("api.tasks")

router = APIRouter(prefix=settings.api_prefix, tags=["Tasks"])


@router.get("/")
async def read_root():
    """API health check endpoint."""
    return {"message": "Daily Tasks API is running!"}


@router.get("/tasks", response_model=DailyTasksResponse)
async def list_tasks(
    day: str | None = Query(
        None,
        alias="date",
        description="YYYY-MM-DD, or today, yesterday or tomorrow (default: today)",
    ),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_app_db),
    clock: Clock = Depends(get_clock),
    page_db_handler: DailyPageDBHandler = Depends(),
    task_db_handler: TaskDBHandler = Depends(),
):
    """Get the caller's tasks for a date, oldest first."""
    try:
        target_date = clock.parse_date(day)
    except ValueError as e:
        raise ValidationError(f"Invalid date: {day}") from e

    page = await page_db_handler.get_or_create(target_date, db=db)

    tasks = await task_db_handler.get_tasks_for_page(page.id, current_user.id, db=db)
    logger.debug(f"Found {len(tasks)} tasks of user {current_user.id} on {page.date}")

    return DailyTasksResponse(
        date=page.date, tasks=[TaskResponse.model_validate(task) for task in tasks]
    )


@router.post(
    "/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED
)
async def create_task(
    task_data: CreateTaskRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_app_db),
    clock: Clock = Depends(get_clock),
    page_db_handler: DailyPageDBHandler = Depends(),
    task_db_handler: TaskDBHandler = Depends(),
):
    """Create a task on today's page."""
    page = await page_db_handler.get_or_create(clock.today(), db=db)

    task = await task_db_handler.create(
        {
            "daily_page_id": page.id,
            "user_id": current_user.id,
            "title": task_data.title,
            "description": task_data.description,
            "is_completed": False,
        },
        db=db,
    )
    task = await task_db_handler.get_task_with_owner(task.id, db=db)
    logger.info(f"Created task {task.id} for user {current_user.id} on {page.date}")

    return TaskResponse.model_validate(task)


@router.post("/tasks/rollover", response_model=RolloverResponse)
async def rollover_tasks(
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    """Copy yesterday's incomplete tasks into today."""
    logger.info(f"Rollover requested by user {current_user.id}")
    try:
        result = await RolloverService().rollover(clock)
    except Exception as e:
        logger.error(f"Rollover failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Rollover failed",
        ) from e

    return RolloverResponse(moved=result.moved)


@router.get("/tasks/{task_id}", response_model=TaskResponse)
async def get_task(task: Task = Depends(get_task_or_404)):
    """Retrieve a task with its owner's identity."""
    return TaskResponse.model_validate(task)


@router.put("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    update_data: UpdateTaskRequest,
    task: Task = Depends(require_owned_task("update")),
    db: AsyncSession = Depends(get_app_db),
    clock: Clock = Depends(get_clock),
    task_db_handler: TaskDBHandler = Depends(),
):
    """Partially update a task owned by the caller."""
    changes = update_data.model_dump(exclude_unset=True)
    updated = await task_db_handler.update_task(
        task, changes, completed_at=clock.now(), db=db
    )
    logger.info(f"Updated task {updated.id}: {sorted(changes)}")
    return TaskResponse.model_validate(updated)


@router.delete("/tasks/{task_id}", response_model=MessageResponse)
async def delete_task(
    task: Task = Depends(require_owned_task("delete")),
    db: AsyncSession = Depends(get_app_db),
    task_db_handler: TaskDBHandler = Depends(),
):
    """Delete a task owned by the caller."""
    await task_db_handler.remove(task.id, db=db)
    logger.info(f"Deleted task {task.id}")
    return MessageResponse(message="Deleted")
