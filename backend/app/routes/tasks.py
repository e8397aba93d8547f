"""
Task routes for the Taskboard API.
"""

import uuid
from datetime import date
from fastapi import APIRouter, Depends, Query, status

from app.auth import get_current_user
from app.config import get_settings
from app.exceptions import ErrorResponse
from app.models import Task, TaskStatus
from app.routes.deps import get_task_service
from app.schemas import Page, Pagination, TaskCreate, TaskFilters, TaskRead, TaskStatusUpdate, TaskUpdate
from app.services.tasks import TaskService

router = APIRouter(dependencies=[Depends(get_current_user)])

NOT_FOUND = {404: {"model": ErrorResponse}}
CONFLICT = {409: {"model": ErrorResponse}}


@router.get("/", response_model=Page[TaskRead])
async def list_tasks(
    status: TaskStatus | None = None,
    end_date: date | None = None,
    assigned_user: uuid.UUID | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(get_settings().default_page_limit, ge=1),
    tasks: TaskService = Depends(get_task_service),
) -> Page[TaskRead]:
    """
    List tasks.

    Optionally filter by status, end date (calendar day) and assigned user.
    """
    filters = TaskFilters(status=status, end_date=end_date, assigned_user=assigned_user)
    return await tasks.list_tasks(filters, Pagination(skip=skip, limit=limit))


@router.get("/name/{name}", response_model=list[TaskRead], responses=NOT_FOUND)
async def get_tasks_by_name(
    name: str,
    tasks: TaskService = Depends(get_task_service),
) -> list[Task]:
    return await tasks.get_tasks_by_name(name)


@router.get("/description/{description}", response_model=list[TaskRead], responses=NOT_FOUND)
async def get_tasks_by_description(
    description: str,
    tasks: TaskService = Depends(get_task_service),
) -> list[Task]:
    return await tasks.get_tasks_by_description(description)


@router.get("/{task_id}", response_model=TaskRead, responses=NOT_FOUND)
async def get_task(
    task_id: uuid.UUID,
    tasks: TaskService = Depends(get_task_service),
) -> Task:
    """Get a task by ID."""
    return await tasks.get_task(task_id)


@router.post(
    "/",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    responses={**NOT_FOUND, **CONFLICT},
)
async def create_task(
    task_in: TaskCreate,
    tasks: TaskService = Depends(get_task_service),
) -> Task:
    """
    Create a new task in a project.

    Every assignee must already be a member of the project.
    start_date and end_date default to today.
    """
    return await tasks.create_task(task_in)


@router.patch("/{task_id}", response_model=TaskRead, responses={**NOT_FOUND, **CONFLICT})
async def update_task(
    task_id: uuid.UUID,
    task_in: TaskUpdate,
    tasks: TaskService = Depends(get_task_service),
) -> Task:
    """
    Update a task.

    Supplying a different project_id moves the task to that project.
    """
    return await tasks.update_task(task_id, task_in)


@router.put("/{task_id}/status", response_model=TaskRead, responses=NOT_FOUND)
async def change_task_state(
    task_id: uuid.UUID,
    body: TaskStatusUpdate,
    tasks: TaskService = Depends(get_task_service),
) -> Task:
    return await tasks.change_task_state(task_id, body.status)


@router.put(
    "/{task_id}/users/{user_id}",
    response_model=TaskRead,
    responses={**NOT_FOUND, **CONFLICT},
)
async def assign_task_to_user(
    task_id: uuid.UUID,
    user_id: uuid.UUID,
    tasks: TaskService = Depends(get_task_service),
) -> Task:
    """Assign a project member to the task."""
    return await tasks.assign_task_to_user(task_id, user_id)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
async def delete_task(
    task_id: uuid.UUID,
    tasks: TaskService = Depends(get_task_service),
) -> None:
    """Delete a task and remove it from its project."""
    await tasks.delete_task(task_id)
