"""Pagination schemas."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PageParams(BaseModel):
    """Resolved pagination parameters (zero-based page index)."""

    page: int = Field(0, ge=0)
    size: int = Field(20, ge=1)

    @property
    def offset(self) -> int:
        return self.page * self.size


class Page(BaseModel, Generic[T]):
    """Paginated list envelope."""

    items: list[T]
    total: int
    page: int
    size: int
