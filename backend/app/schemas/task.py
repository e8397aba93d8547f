import uuid
from datetime import date, datetime
from pydantic import BaseModel, Field, field_validator

from app.models.task import TaskStatus


class TaskCreate(BaseModel):
    """Schema for creating a new task."""
    name: str = Field(min_length=1, max_length=40)
    description: str = "Empty description"
    status: TaskStatus = TaskStatus.pending
    assigned_to: list[uuid.UUID] = Field(default_factory=list)
    start_date: date | None = None  # Defaults to today if not provided
    end_date: date | None = None  # Defaults to today if not provided
    project_id: uuid.UUID


class TaskUpdate(BaseModel):
    """
    Schema for updating a task.

    Presence is what matters: every key the client sends is applied, even
    falsy ones such as an empty description or an empty assignee list.
    """
    name: str | None = Field(default=None, min_length=1, max_length=40)
    description: str | None = None
    status: TaskStatus | None = None
    assigned_to: list[uuid.UUID] | None = None
    start_date: date | None = None
    end_date: date | None = None
    project_id: uuid.UUID | None = None

    @field_validator("*")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not set to null")
        return value


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class TaskFilters(BaseModel):
    """Optional listing filters; all supplied filters must match."""
    status: TaskStatus | None = None
    end_date: date | None = None
    assigned_user: uuid.UUID | None = None


class TaskRead(BaseModel):
    """Schema for reading a task."""
    id: uuid.UUID
    name: str
    description: str
    status: TaskStatus
    assigned_to: list[uuid.UUID]
    start_date: date
    end_date: date
    project_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TaskSummary(BaseModel):
    """Task as embedded in project listings."""
    id: uuid.UUID
    name: str
    status: TaskStatus

    model_config = {"from_attributes": True}
