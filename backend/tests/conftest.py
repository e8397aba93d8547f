"""
Pytest configuration and fixtures for Taskboard tests.

Each test runs against its own SQLite database file (aiosqlite), so
transactions, rollbacks and concurrent reads behave as on a real server.
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel

from app.main import app
from app.database import get_session_maker, use_immediate_transactions
from app.schemas import ProjectCreate, TaskCreate, UserCreate
from app.services.membership import MembershipChecker
from app.services.projects import ProjectService
from app.services.tasks import TaskService
from app.services.users import UserService

TEST_PASSWORD = "correct horse battery staple"


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    """Create a test database engine with all tables."""
    engine = use_immediate_transactions(
        create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'taskboard_test.db'}", echo=False)
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
def sessions(test_engine):
    """Session factory bound to the test database."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def membership(sessions):
    return MembershipChecker(sessions)


@pytest.fixture
def project_service(sessions):
    return ProjectService(sessions)


@pytest.fixture
def task_service(sessions, membership):
    return TaskService(sessions, membership)


@pytest.fixture
def user_service(sessions):
    return UserService(sessions)


@pytest.fixture
def make_user(user_service):
    """Factory creating users with unique emails."""
    counter = {"n": 0}

    async def _make_user(name: str = "Santiago"):
        counter["n"] += 1
        return await user_service.create_user(UserCreate(
            name=name,
            email=f"user{counter['n']}@example.com",
            password=TEST_PASSWORD,
        ))

    return _make_user


@pytest.fixture
def make_project(project_service):
    async def _make_project(name: str = "Alpha", users=()):
        return await project_service.create_project(
            ProjectCreate(name=name, users=[user.id for user in users])
        )

    return _make_project


@pytest.fixture
def make_task(task_service):
    async def _make_task(project, name: str = "Task one", assigned_to=(), **fields):
        return await task_service.create_task(TaskCreate(
            name=name,
            project_id=project.id,
            assigned_to=[user.id for user in assigned_to],
            **fields,
        ))

    return _make_task


@pytest_asyncio.fixture(scope="function")
async def client(sessions):
    """Create an async test client with test database."""
    app.dependency_overrides[get_session_maker] = lambda: sessions

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def api_user(client):
    """Sign up and log in a user; returns its id and bearer headers."""
    resp = await client.post(
        "/api/auth/users",
        json={"name": "Api User", "email": "api@example.com", "password": TEST_PASSWORD},
    )
    assert resp.status_code == 201
    user_id = resp.json()["id"]

    resp = await client.post(
        "/api/auth/login",
        json={"email": "api@example.com", "password": TEST_PASSWORD},
    )
    assert resp.status_code == 200
    token = resp.json()["access_token"]

    return {"id": user_id, "headers": {"Authorization": f"Bearer {token}"}}
