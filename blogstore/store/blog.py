"""Blog collection store: paginated list, current post, request status.

All backend reads and writes for blog posts go through this store.  Each
operation is a pending -> fulfilled | rejected sequence; the transition
functions below are pure and can be tested without a store.

Creates and deletes are applied optimistically to ``items`` and do not
adjust ``total_count``.  The count is reconciled on the next list request.
"""

from collections.abc import Callable
from datetime import datetime, timezone

from blogstore.models.blog import (
    PAGE_SIZE,
    BlogPage,
    BlogPost,
    BlogStatus,
    CollectionState,
)
from blogstore.models.common import RequestStatus
from blogstore.models.session import User
from blogstore.services.blog_table import BlogTable
from blogstore.services.errors import AuthenticationRequiredError
from blogstore.store.base import FULFILLED, PENDING, REJECTED, Action, Store

STORE_NAME = "blog"

FETCH_BLOGS = "fetch_blogs"
FETCH_BLOG = "fetch_blog"
CREATE_BLOG = "create_blog"
UPDATE_BLOG = "update_blog"
DELETE_BLOG = "delete_blog"
CLEAR_ERROR = f"{STORE_NAME}/clear_error"
CLEAR_CURRENT = f"{STORE_NAME}/clear_current"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# -- pure transitions --------------------------------------------------------


def pending(state: CollectionState) -> CollectionState:
    return state.model_copy(
        update={"status": RequestStatus.LOADING, "error_message": None}
    )


def rejected(state: CollectionState, message: str) -> CollectionState:
    """Record the failure; every data field keeps its pre-call value."""
    return state.model_copy(
        update={"status": RequestStatus.ERROR, "error_message": message}
    )


def list_fulfilled(state: CollectionState, page: BlogPage) -> CollectionState:
    return state.model_copy(
        update={
            "status": RequestStatus.IDLE,
            "items": list(page.items),
            "total_count": page.total_count,
            "page": page.page,
        }
    )


def get_fulfilled(state: CollectionState, post: BlogPost) -> CollectionState:
    return state.model_copy(update={"status": RequestStatus.IDLE, "current": post})


def create_fulfilled(state: CollectionState, post: BlogPost) -> CollectionState:
    return state.model_copy(
        update={"status": RequestStatus.IDLE, "items": [post, *state.items]}
    )


def update_fulfilled(state: CollectionState, post: BlogPost) -> CollectionState:
    items = [post if item.id == post.id else item for item in state.items]
    return state.model_copy(
        update={"status": RequestStatus.IDLE, "items": items, "current": post}
    )


def delete_fulfilled(state: CollectionState, blog_id: str) -> CollectionState:
    items = [item for item in state.items if item.id != blog_id]
    return state.model_copy(update={"status": RequestStatus.IDLE, "items": items})


def clear_error(state: CollectionState) -> CollectionState:
    status = RequestStatus.IDLE if state.status is RequestStatus.ERROR else state.status
    return state.model_copy(update={"status": status, "error_message": None})


def clear_current(state: CollectionState) -> CollectionState:
    return state.model_copy(update={"current": None})


_FULFILLED_HANDLERS = {
    FETCH_BLOGS: list_fulfilled,
    FETCH_BLOG: get_fulfilled,
    CREATE_BLOG: create_fulfilled,
    UPDATE_BLOG: update_fulfilled,
    DELETE_BLOG: delete_fulfilled,
}


def blog_reducer(state: CollectionState, action: Action) -> CollectionState:
    """Route an action to its transition. Unknown actions leave state as is."""
    if action.type == CLEAR_ERROR:
        return clear_error(state)
    if action.type == CLEAR_CURRENT:
        return clear_current(state)

    parts = action.type.split("/")
    if len(parts) != 3 or parts[0] != STORE_NAME:
        return state
    _, operation, phase = parts
    if operation not in _FULFILLED_HANDLERS:
        return state

    if phase == PENDING:
        return pending(state)
    if phase == REJECTED:
        return rejected(state, action.error or "Request failed")
    if phase == FULFILLED:
        return _FULFILLED_HANDLERS[operation](state, action.payload)
    return state


# -- store -------------------------------------------------------------------


class BlogCollectionStore(Store[CollectionState]):
    """Single source of truth for blog list/detail state.

    Args:
        table: Access to the ``blogs`` table.
        session_reader: Returns the signed-in user (or None) at call time;
            used by ``create_blog`` to stamp the author.
        page_size: Posts per list window.
        clock: Source of ``updated_at`` timestamps for edits and deletes.
    """

    def __init__(
        self,
        table: BlogTable,
        session_reader: Callable[[], User | None],
        page_size: int = PAGE_SIZE,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        super().__init__(STORE_NAME, CollectionState(), blog_reducer)
        self._table = table
        self._session_reader = session_reader
        self.page_size = page_size
        self._clock = clock

    def _timestamp(self) -> str:
        return self._clock().isoformat()

    async def fetch_blogs(self, page: int = 1) -> Action:
        """Load one page of active posts, newest first.

        The page is not clamped; a page past the end yields an empty window.
        """

        async def call() -> BlogPage:
            if page < 1:
                raise ValueError(f"Page must be a positive integer, got {page}")
            offset = (page - 1) * self.page_size
            posts, total = await self._table.list_active(offset, self.page_size)
            return BlogPage(items=posts, total_count=total, page=page)

        return await self.run(FETCH_BLOGS, call)

    async def fetch_blog(self, blog_id: str) -> Action:
        """Load a single active post into ``current``."""
        return await self.run(FETCH_BLOG, lambda: self._table.get_active(blog_id))

    async def create_blog(self, title: str, content: str) -> Action:
        """Create a post authored by the signed-in user and prepend it."""

        async def call() -> BlogPost:
            user = self._session_reader()
            if user is None:
                raise AuthenticationRequiredError()
            return await self._table.insert(
                title=title, content=content, author_id=user.id
            )

        return await self.run(CREATE_BLOG, call)

    async def update_blog(self, blog_id: str, title: str, content: str) -> Action:
        """Replace title and content and refresh ``updated_at``.

        Ownership is the caller's concern; the backend is the only authority
        enforcing it here.
        """
        values = {
            "title": title,
            "content": content,
            "updated_at": self._timestamp(),
        }
        return await self.run(UPDATE_BLOG, lambda: self._table.update(blog_id, values))

    async def delete_blog(self, blog_id: str) -> Action:
        """Soft-delete a post and drop it from ``items``."""

        async def call() -> str:
            await self._table.update(
                blog_id,
                {"status": BlogStatus.DELETED.value, "updated_at": self._timestamp()},
                returning=False,
            )
            return blog_id

        return await self.run(DELETE_BLOG, call)

    def clear_error(self) -> Action:
        return self.dispatch(Action(CLEAR_ERROR))

    def clear_current(self) -> Action:
        return self.dispatch(Action(CLEAR_CURRENT))
