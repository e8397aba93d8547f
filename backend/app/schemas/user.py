import uuid
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field


class UserCreate(BaseModel):
    """Schema for signing up a new user."""
    name: str = Field(min_length=3, max_length=40)
    email: EmailStr
    password: str = Field(min_length=1)


class UserRead(BaseModel):
    """Public view of a user; never includes the password hash."""
    id: uuid.UUID
    name: str
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}


class UserSummary(BaseModel):
    """User as embedded in project listings."""
    id: uuid.UUID
    name: str
    email: str

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class LogoutRequest(BaseModel):
    token: str = Field(min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
