"""
Users and credentials: signup, deletion, login and logout.

Login errors never reveal whether the email or the password was wrong.
"""

import uuid

from sqlalchemy import String, cast
from sqlmodel import select

from app.exceptions import BadRequestError, NotFoundError, UnauthorizedError
from app.models import Project, Task, User
from app.schemas import UserCreate
from app.security import create_access_token, decode_access_token, hash_password, verify_password
from app.services.base import Service


class UserService(Service):

    async def create_user(self, user_in: UserCreate) -> User:
        async with self._operation("create_user", email=user_in.email):
            async with self.sessions.begin() as session:
                existing = await session.execute(select(User).where(User.email == user_in.email))
                if existing.scalars().first():
                    raise BadRequestError(f"User with email {user_in.email} already exists")

                user = User(
                    name=user_in.name,
                    email=user_in.email,
                    password_hash=hash_password(user_in.password),
                )
                session.add(user)
                await session.flush()
            return user

    async def get_user(self, user_id: uuid.UUID) -> User:
        user = await self._load(User, user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    async def delete_user(self, user_id: uuid.UUID) -> None:
        """
        Delete a user and drop every reference to them, atomically.

        The id is removed from all project member lists and task assignee
        lists so no task is left assigned to a user who no longer exists.
        """
        marker = f'"{user_id}"'
        async with self._operation("delete_user", user=user_id):
            async with self.sessions.begin() as session:
                user = await session.get(User, user_id)
                if not user:
                    raise NotFoundError("User", user_id)

                projects = await session.execute(
                    select(Project).where(cast(Project.users, String).contains(marker))
                )
                for project in projects.scalars().all():
                    project.users = [member for member in project.users if member != str(user_id)]

                tasks = await session.execute(
                    select(Task).where(cast(Task.assigned_to, String).contains(marker))
                )
                for task in tasks.scalars().all():
                    task.assigned_to = [assignee for assignee in task.assigned_to if assignee != str(user_id)]

                await session.delete(user)

    async def login(self, email: str, password: str) -> str:
        """Return a signed access token for valid credentials."""
        async with self._operation("login", email=email):
            async with self.sessions() as session:
                result = await session.execute(select(User).where(User.email == email))
                user = result.scalars().first()

            if not user or not verify_password(password, user.password_hash):
                raise UnauthorizedError("Wrong credentials")

            return create_access_token(str(user.id), user.email)

    async def authenticate(self, token: str) -> User | None:
        """Resolve a token to its live user, or None if it does not check out."""
        claims = decode_access_token(token)
        if not claims:
            return None

        try:
            user_id = uuid.UUID(claims["sub"])
        except ValueError:
            return None

        user = await self._load(User, user_id)
        if not user or user.email != claims["email"]:
            return None
        return user

    async def logout(self, token: str) -> None:
        """
        Validate the token being discarded.

        Tokens are stateless; the client drops it. Invalid tokens are reported
        the same way whatever the reason.
        """
        async with self._operation("logout"):
            if await self.authenticate(token) is None:
                raise BadRequestError("Invalid JWT")
