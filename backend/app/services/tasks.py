"""
Task lifecycle, task assignment and the task side of `Project.tasks`.

Consistency rules kept here:
- a task id is listed in exactly the `tasks` of the project it points at
- every assignee of a task is a member of the task's project
- assigning a user to a task never makes them a project member

Every operation writing a task together with a project runs in one
transaction; a failure at any step rolls the whole operation back. The
project rows whose `tasks` list is rewritten are locked first, so
concurrent creates, moves and deletes on one project serialize.
"""

import asyncio
import logging
import uuid
from datetime import date, datetime
from typing import Iterable

from sqlalchemy import String, cast, func, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select

from app.config import get_settings
from app.exceptions import ConflictError, NotFoundError
from app.models import Project, Task, TaskStatus, User
from app.schemas import Page, Pagination, TaskCreate, TaskFilters, TaskRead, TaskUpdate
from app.services.base import Service
from app.services.membership import MembershipChecker
from app.services.pagination import page_metadata


class TaskService(Service):
    path = f"{get_settings().api_prefix}/tasks"

    def __init__(
        self,
        sessions: async_sessionmaker[AsyncSession],
        membership: MembershipChecker,
        logger: logging.Logger | None = None,
    ):
        super().__init__(sessions, logger)
        self.membership = membership

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_tasks(self, filters: TaskFilters, pagination: Pagination) -> Page[TaskRead]:
        """
        Page of tasks matching every supplied filter.

        The end_date filter is part of the query, so the page counts describe
        the filtered result set.
        """
        conditions = []
        if filters.status is not None:
            conditions.append(Task.status == filters.status)
        if filters.end_date is not None:
            conditions.append(Task.end_date == filters.end_date)
        if filters.assigned_user is not None:
            # assigned_to is a JSON list of id strings
            conditions.append(cast(Task.assigned_to, String).contains(f'"{filters.assigned_user}"'))

        async with self._operation("list_tasks", **filters.model_dump(exclude_none=True)):
            async with self.sessions() as session:
                total = (await session.execute(
                    select(func.count()).select_from(Task).where(*conditions)
                )).scalar_one()

                result = await session.execute(
                    select(Task)
                    .where(*conditions)
                    .order_by(Task.created_at, Task.id)
                    .offset(pagination.skip)
                    .limit(pagination.limit)
                )
                tasks = list(result.scalars().all())

            return Page[TaskRead](
                items=[TaskRead.model_validate(task) for task in tasks],
                **page_metadata(total, pagination, self.path, filters.model_dump(mode="json")),
            )

    async def get_task(self, task_id: uuid.UUID) -> Task:
        task = await self._load(Task, task_id)
        if not task:
            raise NotFoundError("Task", task_id)
        return task

    async def get_tasks_by_name(self, name: str) -> list[Task]:
        """Tasks named exactly `name`; no match is NotFound, not an empty list."""
        tasks = await self._find(Task.name == name)
        if not tasks:
            raise NotFoundError("Task named", repr(name))
        return tasks

    async def get_tasks_by_description(self, description: str) -> list[Task]:
        tasks = await self._find(Task.description == description)
        if not tasks:
            raise NotFoundError("Task described as", repr(description))
        return tasks

    # ------------------------------------------------------------------
    # Writes spanning task and project
    # ------------------------------------------------------------------

    async def create_task(self, task_in: TaskCreate) -> Task:
        """
        Create a task and list it on its project, atomically.

        Raises:
            NotFoundError: the project does not exist
            ConflictError: an assignee is not a member of the project
        """
        async with self._operation("create_task", name=task_in.name, project=task_in.project_id):
            async with self.sessions.begin() as session:
                project = await self._lock_project(session, task_in.project_id)
                if not project:
                    raise NotFoundError("Project", task_in.project_id)

                await self._ensure_members(session, task_in.assigned_to, project.id)

                task_data = task_in.model_dump()
                today = date.today()
                task_data["start_date"] = task_data["start_date"] or today
                task_data["end_date"] = task_data["end_date"] or today
                task_data["assigned_to"] = [str(user_id) for user_id in task_in.assigned_to]

                task = Task(**task_data)
                session.add(task)
                await session.flush()

                self._attach_to_project(project, task.id)
            return task

    async def update_task(self, task_id: uuid.UUID, task_in: TaskUpdate) -> Task:
        """
        Apply a partial update; moving projects relists the task atomically.

        Assignees are checked against the project the task will belong to
        after the update. When only the project changes, the current
        assignees are checked against the new project.
        """
        update_data = task_in.model_dump(exclude_unset=True)

        async with self._operation("update_task", task=task_id, fields=sorted(update_data)):
            async with self.sessions.begin() as session:
                task = await session.get(Task, task_id, with_for_update=True)
                if not task:
                    raise NotFoundError("Task", task_id)

                old_project_id = task.project_id
                old_project = new_project = None
                if "project_id" in update_data and update_data["project_id"] != old_project_id:
                    # Lock both lists in a fixed order
                    locked = {}
                    for project_id in sorted({old_project_id, update_data["project_id"]}, key=str):
                        locked[project_id] = await self._lock_project(session, project_id)
                    new_project = locked[update_data["project_id"]]
                    if not new_project:
                        raise NotFoundError("Project", update_data["project_id"])
                    old_project = locked[old_project_id]

                target_project_id = update_data.get("project_id", old_project_id)
                if "assigned_to" in update_data:
                    await self._ensure_members(session, update_data["assigned_to"], target_project_id)
                    update_data["assigned_to"] = [str(user_id) for user_id in update_data["assigned_to"]]
                elif new_project is not None:
                    await self._ensure_members(session, task.assigned_to, target_project_id)

                for field, value in update_data.items():
                    setattr(task, field, value)
                task.updated_at = datetime.utcnow()
                await session.flush()

                if new_project is not None:
                    if old_project:
                        self._detach_from_project(old_project, task.id)
                    self._attach_to_project(new_project, task.id)
                    await session.flush()
                    self.logger.info(f"Task {task_id} moved from project {old_project_id} to {new_project.id}")
            return task

    async def delete_task(self, task_id: uuid.UUID) -> None:
        """Delete a task and unlist it from its project, atomically."""
        async with self._operation("delete_task", task=task_id):
            async with self.sessions.begin() as session:
                task = await session.get(Task, task_id, with_for_update=True)
                if not task:
                    raise NotFoundError("Task", task_id)

                project = await self._lock_project(session, task.project_id)
                await session.delete(task)
                await session.flush()

                if project:
                    self._detach_from_project(project, task_id)
                else:
                    self.logger.warning(f"Deleted task {task_id} pointed at missing project {task.project_id}")

    # ------------------------------------------------------------------
    # Single-row writes
    # ------------------------------------------------------------------

    async def change_task_state(self, task_id: uuid.UUID, status: TaskStatus) -> Task:
        """Set only the status. Any status may follow any other."""
        async with self._operation("change_task_state", task=task_id, status=status.value):
            async with self.sessions.begin() as session:
                task = await session.get(Task, task_id)
                if not task:
                    raise NotFoundError("Task", task_id)
                task.status = status
                task.updated_at = datetime.utcnow()
            return task

    async def assign_task_to_user(self, task_id: uuid.UUID, user_id: uuid.UUID) -> Task:
        """
        Add a project member to the task's assignees.

        Like project membership, this rewrites the list read just before and
        is not protected against a concurrent append on the same task.
        """
        async with self._operation("assign_task_to_user", task=task_id, user=user_id):
            task, user = await asyncio.gather(
                self._load(Task, task_id),
                self._load(User, user_id),
            )
            if not task:
                raise NotFoundError("Task", task_id)
            if not user:
                raise NotFoundError("User", user_id)

            if not await self.membership.is_user_in_project(user_id, task.project_id):
                raise ConflictError(
                    f"The user with id {user_id} is not working in project {task.project_id}"
                )
            if task.is_assigned(user_id):
                raise ConflictError(f"User with id {user_id} is already working in the task")

            assigned_to = [*task.assigned_to, str(user_id)]
            updated_at = datetime.utcnow()
            async with self.sessions.begin() as session:
                await session.execute(
                    update(Task)
                    .where(Task.id == task_id)
                    .values(assigned_to=assigned_to, updated_at=updated_at)
                )
            task.assigned_to = assigned_to
            task.updated_at = updated_at
            return task

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _find(self, *conditions) -> list[Task]:
        async with self.sessions() as session:
            result = await session.execute(
                select(Task).where(*conditions).order_by(Task.created_at, Task.id)
            )
            return list(result.scalars().all())

    async def _ensure_members(
        self,
        session: AsyncSession,
        user_ids: Iterable[uuid.UUID | str],
        project_id: uuid.UUID,
    ) -> None:
        for user_id in user_ids:
            if not await self.membership.is_user_in_project(user_id, project_id, session=session):
                raise ConflictError(
                    f"The user with id {user_id} is not working in project {project_id}"
                )

    @staticmethod
    def _attach_to_project(project: Project, task_id: uuid.UUID) -> None:
        # add-to-set
        if str(task_id) not in project.tasks:
            project.tasks = [*project.tasks, str(task_id)]
            project.updated_at = datetime.utcnow()

    @staticmethod
    def _detach_from_project(project: Project, task_id: uuid.UUID) -> None:
        project.tasks = [listed for listed in project.tasks if listed != str(task_id)]
        project.updated_at = datetime.utcnow()

    @staticmethod
    async def _lock_project(session: AsyncSession, project_id: uuid.UUID) -> Project | None:
        # Row lock held until the transaction ends; writers of `tasks` queue here
        return await session.get(Project, project_id, with_for_update=True)
