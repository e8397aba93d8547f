"""
Project lifecycle and the `Project.users` / `Project.tasks` lists.

`tasks` is never written from here except by the cascade in delete_project;
task creation, moves and deletion keep it in step (see services.tasks).
"""

import asyncio
import uuid
from datetime import datetime
from typing import Iterable

from sqlalchemy import delete, func, or_, update
from sqlmodel import select

from app.config import get_settings
from app.exceptions import BadRequestError, ConflictError, NotFoundError
from app.models import Project, Task, User
from app.schemas import (
    Page,
    Pagination,
    ProjectCreate,
    ProjectListItem,
    ProjectUpdate,
    TaskSummary,
    UserSummary,
)
from app.services.base import Service
from app.services.pagination import page_metadata


def _as_uuids(ids: Iterable[str]) -> list[uuid.UUID]:
    return [uuid.UUID(value) for value in ids]


class ProjectService(Service):
    path = f"{get_settings().api_prefix}/projects"

    async def list_projects(self, pagination: Pagination) -> Page[ProjectListItem]:
        """Page of projects with their users and tasks expanded into summaries."""
        async with self._operation("list_projects", skip=pagination.skip, limit=pagination.limit):
            async with self.sessions() as session:
                total = (await session.execute(
                    select(func.count()).select_from(Project)
                )).scalar_one()

                result = await session.execute(
                    select(Project)
                    .order_by(Project.created_at, Project.id)
                    .offset(pagination.skip)
                    .limit(pagination.limit)
                )
                projects = list(result.scalars().all())

                user_ids = {user_id for project in projects for user_id in project.users}
                task_ids = {task_id for project in projects for task_id in project.tasks}

                users = {}
                if user_ids:
                    rows = await session.execute(select(User).where(User.id.in_(_as_uuids(user_ids))))
                    users = {str(user.id): user for user in rows.scalars().all()}

                tasks = {}
                if task_ids:
                    rows = await session.execute(select(Task).where(Task.id.in_(_as_uuids(task_ids))))
                    tasks = {str(task.id): task for task in rows.scalars().all()}

            # Dangling references are left out, not reported
            items = [
                ProjectListItem(
                    id=project.id,
                    name=project.name,
                    users=[UserSummary.model_validate(users[u]) for u in project.users if u in users],
                    tasks=[TaskSummary.model_validate(tasks[t]) for t in project.tasks if t in tasks],
                    created_at=project.created_at,
                    updated_at=project.updated_at,
                )
                for project in projects
            ]
            return Page[ProjectListItem](
                items=items,
                **page_metadata(total, pagination, self.path),
            )

    async def get_project(self, project_id: uuid.UUID) -> Project:
        project = await self._load(Project, project_id)
        if not project:
            raise NotFoundError("Project", project_id)
        return project

    async def create_project(self, project_in: ProjectCreate) -> Project:
        """Create a project. It always starts with no tasks."""
        async with self._operation("create_project", name=project_in.name):
            async with self.sessions.begin() as session:
                await self._ensure_users_exist(session, project_in.users)
                project = Project(
                    name=project_in.name,
                    users=[str(user_id) for user_id in project_in.users],
                    tasks=[],
                )
                session.add(project)
                await session.flush()
            return project

    async def update_project(self, project_id: uuid.UUID, project_in: ProjectUpdate) -> Project:
        """Apply the fields present in the patch; `tasks` is not patchable."""
        update_data = project_in.model_dump(exclude_unset=True)

        async with self._operation("update_project", project=project_id, fields=sorted(update_data)):
            async with self.sessions.begin() as session:
                project = await session.get(Project, project_id)
                if not project:
                    raise NotFoundError("Project", project_id)

                if "users" in update_data:
                    await self._ensure_users_exist(session, update_data["users"])
                    update_data["users"] = [str(user_id) for user_id in update_data["users"]]

                for field, value in update_data.items():
                    setattr(project, field, value)
                project.updated_at = datetime.utcnow()
                await session.flush()
            return project

    async def delete_project(self, project_id: uuid.UUID) -> None:
        """Delete a project and all of its tasks as one unit."""
        async with self._operation("delete_project", project=project_id):
            async with self.sessions.begin() as session:
                # Locked so no task can be listed on the project mid-cascade
                project = await session.get(Project, project_id, with_for_update=True)
                if not project:
                    raise NotFoundError("Project", project_id)

                # Tasks listed by the project, plus any whose back-reference still points here
                task_filter = Task.project_id == project.id
                if project.tasks:
                    task_filter = or_(Task.id.in_(_as_uuids(project.tasks)), task_filter)

                result = await session.execute(
                    delete(Task).where(task_filter).execution_options(synchronize_session=False)
                )
                self.logger.debug(f"Cascade removed {result.rowcount} tasks of project {project_id}")

                await session.delete(project)

    async def assign_user_to_project(self, project_id: uuid.UUID, user_id: uuid.UUID) -> Project:
        """
        Add a user to the project's members.

        Single-row write of the list read just before; two concurrent calls
        on the same project may lose one of the appends.
        """
        async with self._operation("assign_user_to_project", project=project_id, user=user_id):
            project, user = await asyncio.gather(
                self._load(Project, project_id),
                self._load(User, user_id),
            )
            if not project:
                raise NotFoundError("Project", project_id)
            if not user:
                raise NotFoundError("User", user_id)

            if project.has_user(user_id):
                raise ConflictError(f"The user with id {user_id} is already working in the project")

            users = [*project.users, str(user_id)]
            updated_at = datetime.utcnow()
            async with self.sessions.begin() as session:
                await session.execute(
                    update(Project)
                    .where(Project.id == project_id)
                    .values(users=users, updated_at=updated_at)
                )
            project.users = users
            project.updated_at = updated_at
            return project

    async def _ensure_users_exist(self, session, user_ids: list[uuid.UUID]) -> None:
        if not user_ids:
            return
        result = await session.execute(select(User.id).where(User.id.in_(list(user_ids))))
        found = {str(row) for row in result.scalars().all()}
        missing = [str(user_id) for user_id in user_ids if str(user_id) not in found]
        if missing:
            raise BadRequestError(
                "Unknown users referenced",
                details=[
                    {"loc": ["body", "users"], "msg": f"User with id {user_id} not found", "type": "not_found"}
                    for user_id in missing
                ],
            )
