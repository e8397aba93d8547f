from typing import Generic, TypeVar
from pydantic import BaseModel, Field

from app.config import get_settings

T = TypeVar("T")


class Pagination(BaseModel):
    """Window requested by the caller."""
    skip: int = Field(default=0, ge=0)
    limit: int = Field(default_factory=lambda: get_settings().default_page_limit, ge=1)


class Page(BaseModel, Generic[T]):
    """One page of results plus navigation metadata."""
    items: list[T]
    total_documents: int
    total_pages: int
    current_page: int
    prev: str | None = None
    next: str | None = None
