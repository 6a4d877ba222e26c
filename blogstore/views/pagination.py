"""Page math for the blog list view."""

import math

from pydantic import BaseModel


def total_pages(total_count: int, page_size: int) -> int:
    return math.ceil(total_count / page_size) if total_count > 0 else 0


def clamp_page(page: int, total_count: int, page_size: int) -> int:
    """Clamp *page* into ``1..total_pages`` (page 1 when there are no posts)."""
    last = max(total_pages(total_count, page_size), 1)
    return min(max(page, 1), last)


class Pagination(BaseModel):
    """Pager controls for the list view."""

    page: int
    total_pages: int
    has_previous: bool
    has_next: bool
    pages: list[int]

    @classmethod
    def build(cls, page: int, total_count: int, page_size: int) -> "Pagination":
        count = total_pages(total_count, page_size)
        return cls(
            page=page,
            total_pages=count,
            has_previous=page > 1,
            has_next=page < count,
            pages=list(range(1, count + 1)),
        )
