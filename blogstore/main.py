"""
blogstore

Client-state layer for a single-user blog: the session and blog collection
stores, wired once to the hosted backend and passed to whatever renders
them.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx

from blogstore.config import Settings, get_settings
from blogstore.services.auth import AuthClient
from blogstore.services.blog_table import BlogTable
from blogstore.services.http_client import create_client
from blogstore.services.session_storage import SessionStorage
from blogstore.store.blog import BlogCollectionStore
from blogstore.store.session import SessionStore
from blogstore.views.auth import AuthViews
from blogstore.views.blog import BlogViews

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)


@dataclass
class AppContext:
    """Everything built at process start, passed by reference to consumers."""

    settings: Settings
    client: httpx.AsyncClient
    auth: AuthClient
    table: BlogTable
    session_store: SessionStore
    blog_store: BlogCollectionStore
    auth_views: AuthViews
    blog_views: BlogViews


def build_app(
    settings: Settings | None = None, client: httpx.AsyncClient | None = None
) -> AppContext:
    """Construct the clients, stores and controllers exactly once."""
    settings = settings or get_settings()
    client = client or create_client(settings)

    auth = AuthClient(
        SessionStorage(settings.session_file),
        client=client,
        refresh_margin=settings.session_refresh_margin,
        anon_key=settings.supabase_anon_key,
    )
    table = BlogTable(
        client=client,
        token_provider=lambda: auth.access_token,
        table=settings.blogs_table,
        anon_key=settings.supabase_anon_key,
    )
    session_store = SessionStore(auth)
    blog_store = BlogCollectionStore(
        table,
        session_reader=session_store.current_user,
        page_size=settings.page_size,
    )
    return AppContext(
        settings=settings,
        client=client,
        auth=auth,
        table=table,
        session_store=session_store,
        blog_store=blog_store,
        auth_views=AuthViews(session_store),
        blog_views=BlogViews(blog_store, session_store),
    )


async def start(ctx: AppContext) -> None:
    """Startup: restore any previously issued session."""
    action = await ctx.session_store.check_session()
    user = ctx.session_store.state.user
    if action.ok and user is not None:
        logger.info("Restored session for %s", user.email or user.id)
    elif not action.ok:
        logger.warning("Session check failed: %s", action.error)


@asynccontextmanager
async def app_context(
    settings: Settings | None = None,
) -> AsyncGenerator[AppContext, None]:
    """Application lifespan: build, restore the session, close on exit."""
    ctx = build_app(settings)
    try:
        await start(ctx)
        yield ctx
    finally:
        await ctx.client.aclose()
