"""
Per-request construction of services.

Each provider wires a service from the session factory dependency, so tests
swap the database by overriding `get_session_maker` alone.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.database import get_session_maker
from app.services.membership import MembershipChecker
from app.services.projects import ProjectService
from app.services.tasks import TaskService
from app.services.users import UserService


def get_membership_checker(
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_maker),
) -> MembershipChecker:
    return MembershipChecker(sessions)


def get_project_service(
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_maker),
) -> ProjectService:
    return ProjectService(sessions)


def get_task_service(
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_maker),
    membership: MembershipChecker = Depends(get_membership_checker),
) -> TaskService:
    return TaskService(sessions, membership)


def get_user_service(
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_maker),
) -> UserService:
    return UserService(sessions)
