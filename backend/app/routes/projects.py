"""
Project routes for the Taskboard API.
"""

import uuid
from fastapi import APIRouter, Depends, Query, status

from app.auth import get_current_user
from app.config import get_settings
from app.exceptions import ErrorResponse
from app.models import Project
from app.routes.deps import get_project_service
from app.schemas import Page, Pagination, ProjectCreate, ProjectListItem, ProjectRead, ProjectUpdate
from app.services.projects import ProjectService

router = APIRouter(dependencies=[Depends(get_current_user)])

NOT_FOUND = {404: {"model": ErrorResponse}}


@router.get("/", response_model=Page[ProjectListItem])
async def list_projects(
    skip: int = Query(0, ge=0),
    limit: int = Query(get_settings().default_page_limit, ge=1),
    projects: ProjectService = Depends(get_project_service),
) -> Page[ProjectListItem]:
    """List projects a page at a time, with member and task summaries."""
    return await projects.list_projects(Pagination(skip=skip, limit=limit))


@router.get("/{project_id}", response_model=ProjectRead, responses=NOT_FOUND)
async def get_project(
    project_id: uuid.UUID,
    projects: ProjectService = Depends(get_project_service),
) -> Project:
    """Get a project by ID."""
    return await projects.get_project(project_id)


@router.post(
    "/",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_project(
    project_in: ProjectCreate,
    projects: ProjectService = Depends(get_project_service),
) -> Project:
    """Create a new project. Tasks are added by creating tasks, never here."""
    return await projects.create_project(project_in)


@router.patch("/{project_id}", response_model=ProjectRead, responses=NOT_FOUND)
async def update_project(
    project_id: uuid.UUID,
    project_in: ProjectUpdate,
    projects: ProjectService = Depends(get_project_service),
) -> Project:
    """Update a project's name and/or members."""
    return await projects.update_project(project_id, project_in)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
async def delete_project(
    project_id: uuid.UUID,
    projects: ProjectService = Depends(get_project_service),
) -> None:
    """Delete a project and all its tasks."""
    await projects.delete_project(project_id)


@router.put(
    "/{project_id}/users/{user_id}",
    response_model=ProjectRead,
    responses={**NOT_FOUND, 409: {"model": ErrorResponse}},
)
async def assign_user_to_project(
    project_id: uuid.UUID,
    user_id: uuid.UUID,
    projects: ProjectService = Depends(get_project_service),
) -> Project:
    """Make a user a member of the project."""
    return await projects.assign_user_to_project(project_id, user_id)
