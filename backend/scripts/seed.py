#!/usr/bin/env python3
"""
Seed script to populate a development database with demo data.

Creates users, projects with members, and tasks assigned to those members.
Everything goes through the services, so project task lists and
memberships are consistent exactly as they would be via the API.

Usage:
    python -m scripts.seed [--projects 5] [--tasks 20] [--clear]

Options:
    --projects N   Number of projects to create (default: 5)
    --tasks N      Tasks per project (default: 20)
    --users N      Number of users to create (default: 10)
    --clear        Delete existing data before seeding
"""

import argparse
import asyncio
import random
import time
from datetime import date, timedelta

from sqlalchemy import delete

from app.database import async_session_maker, get_session_context, init_db
from app.logging_config import setup_logging
from app.models import Project, Task, TaskStatus, User
from app.schemas import ProjectCreate, TaskCreate, UserCreate
from app.services.membership import MembershipChecker
from app.services.projects import ProjectService
from app.services.tasks import TaskService
from app.services.users import UserService

DEMO_PASSWORD = "taskboard-demo"


async def clear_data():
    """Clear all existing data."""
    print("Clearing existing data...")
    async with get_session_context() as session:
        await session.execute(delete(Task))
        await session.execute(delete(Project))
        await session.execute(delete(User))
    print("Data cleared.")


async def seed(num_users: int, num_projects: int, tasks_per_project: int) -> None:
    users_service = UserService(async_session_maker)
    projects_service = ProjectService(async_session_maker)
    tasks_service = TaskService(async_session_maker, MembershipChecker(async_session_maker))

    users = []
    for i in range(num_users):
        user = await users_service.create_user(UserCreate(
            name=f"Demo User {i}",
            email=f"demo{i}.{int(time.time())}@example.com",
            password=DEMO_PASSWORD,
        ))
        users.append(user)
    print(f"Created {len(users)} users (password: {DEMO_PASSWORD})")

    start = date.today()
    statuses = list(TaskStatus)
    for p in range(num_projects):
        members = random.sample(users, k=min(len(users), random.randint(1, 4)))
        project = await projects_service.create_project(ProjectCreate(
            name=f"Demo Project {p}",
            users=[member.id for member in members],
        ))

        for t in range(tasks_per_project):
            begins = start + timedelta(days=random.randint(0, 30))
            assignees = random.sample(members, k=random.randint(0, len(members)))
            await tasks_service.create_task(TaskCreate(
                name=f"Task {p}-{t}",
                description=f"Demo task {t} of project {p}",
                status=random.choice(statuses),
                assigned_to=[assignee.id for assignee in assignees],
                start_date=begins,
                end_date=begins + timedelta(days=random.randint(1, 14)),
                project_id=project.id,
            ))
        print(f"Created project: {project.name} ({project.id}) with {tasks_per_project} tasks")


async def main():
    parser = argparse.ArgumentParser(description="Seed the Taskboard database with demo data")
    parser.add_argument("--users", type=int, default=10, help="Number of users to create")
    parser.add_argument("--projects", type=int, default=5, help="Number of projects to create")
    parser.add_argument("--tasks", type=int, default=20, help="Tasks per project")
    parser.add_argument("--clear", action="store_true", help="Clear existing data first")
    args = parser.parse_args()

    setup_logging(level="WARNING")

    # Initialize database
    await init_db()

    if args.clear:
        await clear_data()

    start_time = time.time()
    await seed(args.users, args.projects, args.tasks)
    print(f"\n=== Seeding Complete in {time.time() - start_time:.2f}s ===")


if __name__ == "__main__":
    asyncio.run(main())
