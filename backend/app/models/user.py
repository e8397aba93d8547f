import uuid
from datetime import datetime
from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """Registered user. Referenced by id from projects and tasks."""

    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(index=True)
    email: str = Field(unique=True, index=True)
    password_hash: str
    created_at: datetime = Field(default_factory=datetime.utcnow)
