# Pagination wrapper for list endpoints
from typing import Generic, List, TypeVar

from pydantic import BaseModel, Field, computed_field

T = TypeVar("T")

MAX_PAGE_SIZE = 100


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Generic paginated response wrapper.

    Example:
        PaginatedResponse[TaskRead](total=42, skip=0, limit=10, items=[...])
    """

    total: int = Field(..., description="Total number of matching items")
    skip: int = Field(..., ge=0, description="Number of items skipped")
    limit: int = Field(..., ge=1, le=MAX_PAGE_SIZE, description="Page size")
    items: List[T] = Field(..., description="Items of the current page")

    @computed_field
    @property
    def has_more(self) -> bool:
        return (self.skip + self.limit) < self.total

    @computed_field
    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit


__all__ = ["PaginatedResponse", "MAX_PAGE_SIZE"]
