import enum
import uuid
from datetime import date, datetime
from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class TaskStatus(str, enum.Enum):
    pending = "pending"
    in_progress = "in progress"
    completed = "completed"


class Task(SQLModel, table=True):
    """
    Task model - always belongs to exactly one project.

    Key fields:
    - project_id: owning project; the project's `tasks` list mirrors it
    - assigned_to: user id strings, each a member of the owning project
    - status: not ordered, any value may follow any other
    """

    __tablename__ = "tasks"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(index=True)
    description: str = Field(default="Empty description")
    status: TaskStatus = Field(default=TaskStatus.pending, index=True)
    assigned_to: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    start_date: date = Field(default_factory=date.today)
    end_date: date = Field(default_factory=date.today, index=True)

    # Foreign keys
    project_id: uuid.UUID = Field(foreign_key="projects.id", index=True)

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def is_assigned(self, user_id: uuid.UUID | str) -> bool:
        return str(user_id) in self.assigned_to
