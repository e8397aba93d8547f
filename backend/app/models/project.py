import uuid
from datetime import datetime
from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class Project(SQLModel, table=True):
    """
    Project model - owns a list of member users and a list of tasks.

    Both lists hold id strings and are kept in step with the referenced rows
    by the services, not by foreign keys:
    - users: members allowed to be assigned to the project's tasks
    - tasks: exactly the tasks whose project_id points at this project

    JSON columns are not mutation-tracked; always assign a new list.
    """

    __tablename__ = "projects"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(index=True)
    users: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    tasks: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def has_user(self, user_id: uuid.UUID | str) -> bool:
        return str(user_id) in self.users
