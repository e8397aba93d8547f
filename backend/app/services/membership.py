import uuid

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models import Project


class MembershipChecker:
    """Answers whether a user belongs to a project. Read-only."""

    def __init__(self, sessions: async_sessionmaker[AsyncSession]):
        self.sessions = sessions

    async def is_user_in_project(
        self,
        user_id: uuid.UUID | str,
        project_id: uuid.UUID,
        session: AsyncSession | None = None,
    ) -> bool:
        """
        Return True if `user_id` is listed in the project's users.

        A missing project yields False rather than an error. Pass `session`
        to read inside the caller's open transaction.
        """
        if session is not None:
            project = await session.get(Project, project_id)
        else:
            async with self.sessions() as own_session:
                project = await own_session.get(Project, project_id)

        if project is None:
            return False
        return project.has_user(user_id)
