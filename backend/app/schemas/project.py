import uuid
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from app.schemas.task import TaskSummary
from app.schemas.user import UserSummary


class ProjectCreate(BaseModel):
    """
    Schema for creating a new project.

    There is no `tasks` field: a project starts empty and only gains tasks
    through task creation. A `tasks` key in the body is ignored.
    """
    name: str = Field(min_length=1)
    users: list[uuid.UUID] = Field(default_factory=list)


class ProjectUpdate(BaseModel):
    """Schema for updating a project. Omitted fields are left untouched."""
    name: str | None = Field(default=None, min_length=1)
    users: list[uuid.UUID] | None = None

    @field_validator("name", "users")
    @classmethod
    def reject_null(cls, value):
        # Only reached when the client sent the key explicitly
        if value is None:
            raise ValueError("may be omitted but not set to null")
        return value


class ProjectRead(BaseModel):
    """Schema for reading a project with raw id references."""
    id: uuid.UUID
    name: str
    users: list[uuid.UUID]
    tasks: list[uuid.UUID]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProjectListItem(BaseModel):
    """Project as listed: references expanded into summaries."""
    id: uuid.UUID
    name: str
    users: list[UserSummary]
    tasks: list[TaskSummary]
    created_at: datetime
    updated_at: datetime
