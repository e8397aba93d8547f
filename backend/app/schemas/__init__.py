from app.schemas.pagination import Pagination, Page
from app.schemas.user import UserCreate, UserRead, UserSummary, LoginRequest, LogoutRequest, TokenResponse
from app.schemas.project import ProjectCreate, ProjectUpdate, ProjectRead, ProjectListItem
from app.schemas.task import (
    TaskCreate,
    TaskUpdate,
    TaskRead,
    TaskSummary,
    TaskStatusUpdate,
    TaskFilters,
)

__all__ = [
    "Pagination",
    "Page",
    "UserCreate",
    "UserRead",
    "UserSummary",
    "LoginRequest",
    "LogoutRequest",
    "TokenResponse",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectRead",
    "ProjectListItem",
    "TaskCreate",
    "TaskUpdate",
    "TaskRead",
    "TaskSummary",
    "TaskStatusUpdate",
    "TaskFilters",
]
