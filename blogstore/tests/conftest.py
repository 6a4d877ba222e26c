"""Shared fixtures for blogstore tests."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from blogstore.models.blog import BlogPost, BlogStatus
from blogstore.models.session import User
from blogstore.services.errors import NotFoundError

BASE_TIME = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
TEST_URL = "https://test.supabase.co"


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset all module-level singletons and caches between tests."""
    yield

    # 1. Settings LRU cache
    from blogstore.config import get_settings

    get_settings.cache_clear()

    # 2. HTTP client singleton
    import blogstore.services.http_client as http_mod

    http_mod._client = None


@pytest.fixture
def mock_settings(monkeypatch, tmp_path):
    """Provide a Settings object with safe test defaults."""
    from blogstore.config import Settings, get_settings

    test_settings = Settings(
        supabase_url=TEST_URL,
        supabase_anon_key="test-anon-key",
        blogs_table="blogs",
        page_size=10,
        request_timeout=5.0,
        session_file=tmp_path / "session.json",
        session_refresh_margin=60,
    )

    get_settings.cache_clear()
    monkeypatch.setattr("blogstore.config.get_settings", lambda: test_settings)

    # Patch get_settings in all modules that import it directly
    for mod_path in [
        "blogstore.services.http_client",
        "blogstore.services.auth",
        "blogstore.services.blog_table",
        "blogstore.main",
    ]:
        monkeypatch.setattr(f"{mod_path}.get_settings", lambda: test_settings)

    return test_settings


class Clock:
    """Deterministic clock that moves forward one second per reading."""

    def __init__(self, start: datetime = BASE_TIME) -> None:
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


class FakeBlogTable:
    """In-memory stand-in for the ``blogs`` table with the same contract."""

    def __init__(self, clock: Clock | None = None) -> None:
        self.rows: dict[str, BlogPost] = {}
        self.clock = clock or Clock()
        self.calls: list[str] = []

    def seed(self, count: int, author_id: str = "author-1") -> list[BlogPost]:
        """Insert *count* active posts, oldest first."""
        posts = []
        for i in range(count):
            now = self.clock()
            post = BlogPost(
                id=f"post-{len(self.rows) + 1}",
                title=f"Post number {i + 1}",
                content=f"Body of post number {i + 1}",
                author_id=author_id,
                created_at=now,
                updated_at=now,
            )
            self.rows[post.id] = post
            posts.append(post)
        return posts

    def _active(self) -> list[BlogPost]:
        active = [p for p in self.rows.values() if p.status is BlogStatus.ACTIVE]
        return sorted(active, key=lambda p: p.created_at, reverse=True)

    async def list_active(self, offset: int, limit: int) -> tuple[list[BlogPost], int]:
        self.calls.append("list_active")
        active = self._active()
        return active[offset : offset + limit], len(active)

    async def get_active(self, blog_id: str) -> BlogPost:
        self.calls.append("get_active")
        post = self.rows.get(blog_id)
        if post is None or post.status is not BlogStatus.ACTIVE:
            raise NotFoundError(
                "JSON object requested, multiple (or no) rows returned",
                status_code=406,
                code="PGRST116",
            )
        return post

    async def insert(self, *, title: str, content: str, author_id: str) -> BlogPost:
        self.calls.append("insert")
        now = self.clock()
        post = BlogPost(
            id=str(uuid.uuid4()),
            title=title,
            content=content,
            author_id=author_id,
            created_at=now,
            updated_at=now,
        )
        self.rows[post.id] = post
        return post

    async def update(self, blog_id: str, values: dict, returning: bool = True):
        self.calls.append("update")
        post = self.rows.get(blog_id)
        if post is None:
            raise NotFoundError(
                "JSON object requested, multiple (or no) rows returned",
                status_code=406,
                code="PGRST116",
            )
        changes = dict(values)
        if "updated_at" in changes:
            changes["updated_at"] = datetime.fromisoformat(changes["updated_at"])
        if "status" in changes:
            changes["status"] = BlogStatus(changes["status"])
        updated = post.model_copy(update=changes)
        self.rows[blog_id] = updated
        return updated if returning else None


@pytest.fixture
def clock():
    # Store timestamps start well after any seeded row
    return Clock(start=BASE_TIME + timedelta(days=30))


@pytest.fixture
def table():
    return FakeBlogTable()


@pytest.fixture
def author():
    return User(id="author-1", email="author@example.com")


@pytest.fixture
def blog_store(table, author, clock):
    """Blog store signed in as ``author``."""
    from blogstore.store.blog import BlogCollectionStore

    return BlogCollectionStore(table, session_reader=lambda: author, clock=clock)


@pytest.fixture
def anonymous_blog_store(table, clock):
    from blogstore.store.blog import BlogCollectionStore

    return BlogCollectionStore(table, session_reader=lambda: None, clock=clock)
