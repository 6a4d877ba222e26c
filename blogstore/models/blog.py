"""Blog post data models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from blogstore.models.common import RequestStatus

PAGE_SIZE = 10


class BlogStatus(str, Enum):
    """Posts are never physically removed; deletion is a status change."""

    ACTIVE = "active"
    DELETED = "deleted"


class BlogPost(BaseModel):
    """A row of the ``blogs`` table."""

    id: str
    title: str
    content: str
    author_id: str
    status: BlogStatus = BlogStatus.ACTIVE
    created_at: datetime
    updated_at: datetime


class BlogPage(BaseModel):
    """One window of active posts plus the exact total across all pages."""

    items: list[BlogPost]
    total_count: int
    page: int


class CollectionState(BaseModel):
    """State held by the blog collection store.

    ``items`` is the current page, newest first.  ``total_count`` is the
    number of active posts reported by the last successful list request and
    may drift after optimistic creates/deletes until the next list.
    """

    items: list[BlogPost] = []
    current: BlogPost | None = None
    total_count: int = 0
    page: int = 1
    status: RequestStatus = RequestStatus.IDLE
    error_message: str | None = None

    @property
    def loading(self) -> bool:
        return self.status is RequestStatus.LOADING
