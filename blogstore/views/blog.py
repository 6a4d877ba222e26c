"""Blog list/detail/create/edit controllers.

These sit where the page components sit in a front end: they validate
forms, check ownership, clamp pagination and then dispatch to the blog
collection store.  Nothing here talks to the backend directly.
"""

import logging
from dataclasses import dataclass

from pydantic import BaseModel, ValidationError

from blogstore.models.blog import BlogPost
from blogstore.models.forms import BlogForm, form_error
from blogstore.store.blog import BlogCollectionStore
from blogstore.store.session import SessionStore
from blogstore.views.pagination import Pagination, clamp_page

logger = logging.getLogger(__name__)

LOGIN_REQUIRED = "Please log in to continue"
NOT_OWNER = "You do not have permission to edit this blog."
NOT_FOUND = "Blog post not found"


@dataclass
class ViewResult:
    """Outcome of a form submission or guarded action."""

    ok: bool
    error: str | None = None
    post: BlogPost | None = None


class BlogListView(BaseModel):
    posts: list[BlogPost]
    total_count: int
    pagination: Pagination
    loading: bool
    error: str | None = None
    empty: bool


class BlogDetailView(BaseModel):
    post: BlogPost | None = None
    can_edit: bool = False
    loading: bool = False
    error: str | None = None


class BlogViews:
    """Controllers for the blog pages, bound to the two stores."""

    def __init__(self, blogs: BlogCollectionStore, session: SessionStore) -> None:
        self._blogs = blogs
        self._session = session

    # -- list ----------------------------------------------------------------

    async def show_list(self, page: int = 1) -> BlogListView:
        """Fetch *page*, clamped against the last known total."""
        state = self._blogs.state
        if state.total_count:
            page = clamp_page(page, state.total_count, self._blogs.page_size)
        else:
            page = max(page, 1)
        await self._blogs.fetch_blogs(page)
        return self.list_view()

    def list_view(self) -> BlogListView:
        state = self._blogs.state
        return BlogListView(
            posts=state.items,
            total_count=state.total_count,
            pagination=Pagination.build(
                state.page, state.total_count, self._blogs.page_size
            ),
            loading=state.loading,
            error=state.error_message,
            empty=not state.items and not state.loading,
        )

    # -- detail --------------------------------------------------------------

    async def show_detail(self, blog_id: str) -> BlogDetailView:
        await self._blogs.fetch_blog(blog_id)
        return self.detail_view()

    def detail_view(self) -> BlogDetailView:
        state = self._blogs.state
        post = state.current
        return BlogDetailView(
            post=post,
            can_edit=post is not None and self._owns(post),
            loading=state.loading,
            error=state.error_message,
        )

    def leave_detail(self) -> None:
        """Drop the viewed post so it cannot leak into the next view."""
        self._blogs.clear_current()

    # -- create / edit / delete ----------------------------------------------

    async def create(self, title: str, content: str) -> ViewResult:
        if self._session.current_user() is None:
            return ViewResult(ok=False, error=LOGIN_REQUIRED)
        try:
            form = BlogForm(title=title, content=content)
        except ValidationError as e:
            return ViewResult(ok=False, error=form_error(e))

        action = await self._blogs.create_blog(form.title, form.content)
        if not action.ok:
            return ViewResult(ok=False, error=action.error)
        return ViewResult(ok=True, post=action.payload)

    async def open_edit(self, blog_id: str) -> ViewResult:
        """Load a post for editing; only its author may edit it."""
        post, error = await self._load_owned(blog_id)
        if error:
            return ViewResult(ok=False, error=error)
        return ViewResult(ok=True, post=post)

    async def submit_edit(self, blog_id: str, title: str, content: str) -> ViewResult:
        try:
            form = BlogForm(title=title, content=content)
        except ValidationError as e:
            return ViewResult(ok=False, error=form_error(e))

        _, error = await self._load_owned(blog_id)
        if error:
            return ViewResult(ok=False, error=error)

        action = await self._blogs.update_blog(blog_id, form.title, form.content)
        if not action.ok:
            return ViewResult(ok=False, error=action.error)
        return ViewResult(ok=True, post=action.payload)

    async def delete(self, blog_id: str) -> ViewResult:
        post, error = await self._load_owned(blog_id)
        if error:
            return ViewResult(ok=False, error=error)

        action = await self._blogs.delete_blog(blog_id)
        if not action.ok:
            return ViewResult(ok=False, error=action.error)
        self._blogs.clear_current()
        return ViewResult(ok=True, post=post)

    # -- helpers -------------------------------------------------------------

    def _owns(self, post: BlogPost) -> bool:
        user = self._session.current_user()
        return user is not None and post.author_id == user.id

    async def _load_owned(self, blog_id: str) -> tuple[BlogPost | None, str | None]:
        """Return the post if the signed-in user owns it, else an error."""
        if self._session.current_user() is None:
            return None, LOGIN_REQUIRED

        current = self._blogs.state.current
        if current is None or current.id != blog_id:
            action = await self._blogs.fetch_blog(blog_id)
            if not action.ok:
                return None, action.error or NOT_FOUND
            current = action.payload

        if not self._owns(current):
            logger.warning("Refused edit of blog %s by non-owner", blog_id)
            self._blogs.clear_current()
            return None, NOT_OWNER
        return current, None
