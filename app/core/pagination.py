# app/core/pagination.py
import math
from typing import Generic, List, TypeVar
from pydantic import BaseModel, computed_field

T = TypeVar("T")


def total_pages(total_count: int, page_size: int) -> int:
    return math.ceil(total_count / page_size)


def page_range(page: int, page_size: int) -> tuple:
    """Inclusive-exclusive item range ``[start, end)`` for a 1-based page."""
    if page < 1:
        raise ValueError("page must be >= 1")
    start = (page - 1) * page_size
    return start, start + page_size


class Page(BaseModel, Generic[T]):
    items: List[T] = []
    page: int
    page_size: int
    total_count: int

    @computed_field
    @property
    def total_pages(self) -> int:
        return total_pages(self.total_count, self.page_size)

    @computed_field
    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @computed_field
    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    # "Showing x to y of z"
    @computed_field
    @property
    def first_index(self) -> int:
        if not self.items:
            return 0
        return (self.page - 1) * self.page_size + 1

    @computed_field
    @property
    def last_index(self) -> int:
        return min(self.page * self.page_size, self.total_count) if self.items else 0
