"""Client for the ``blogs`` table (PostgREST-compatible REST API)."""

import logging
from collections.abc import Callable
from typing import Any

import httpx

from blogstore.config import get_settings
from blogstore.models.blog import BlogPost, BlogStatus
from blogstore.services.http_client import (
    backend_headers,
    get_shared_client,
    parse_content_range_total,
    raise_for_backend_error,
)

logger = logging.getLogger(__name__)

REST_PATH = "/rest/v1"
OBJECT_ACCEPT = "application/vnd.pgrst.object+json"


class BlogTable:
    """Row access to the ``blogs`` table.

    Requests carry the signed-in user's access token when one is available
    (via *token_provider*) so the backend's row-level security applies.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        token_provider: Callable[[], str | None] | None = None,
        table: str | None = None,
        anon_key: str | None = None,
    ) -> None:
        self._client = client
        self._token_provider = token_provider
        self._table = table or get_settings().blogs_table
        self._anon_key = (
            get_settings().supabase_anon_key if anon_key is None else anon_key
        )

    @property
    def path(self) -> str:
        return f"{REST_PATH}/{self._table}"

    def _http(self) -> httpx.AsyncClient:
        return self._client or get_shared_client()

    def _headers(self, **extra: str) -> dict[str, str]:
        token = self._token_provider() if self._token_provider else None
        headers = backend_headers(self._anon_key, token)
        headers.update(extra)
        return headers

    async def list_active(self, offset: int, limit: int) -> tuple[list[BlogPost], int]:
        """Return one window of active posts (newest first) and the exact total.

        The total counts every active row, independent of the window.
        """
        params = {
            "select": "*",
            "status": f"eq.{BlogStatus.ACTIVE.value}",
            "order": "created_at.desc",
            "offset": str(offset),
            "limit": str(limit),
        }
        resp = await self._http().get(
            self.path,
            params=params,
            headers=self._headers(Prefer="count=exact"),
        )
        raise_for_backend_error(resp, context="list")
        posts = [BlogPost.model_validate(row) for row in resp.json()]
        total = parse_content_range_total(resp.headers.get("Content-Range"))
        return posts, total

    async def get_active(self, blog_id: str) -> BlogPost:
        """Return the active post with *blog_id*.

        Raises:
            NotFoundError: If no active post has that id.
        """
        params = {
            "select": "*",
            "id": f"eq.{blog_id}",
            "status": f"eq.{BlogStatus.ACTIVE.value}",
        }
        resp = await self._http().get(
            self.path,
            params=params,
            headers=self._headers(Accept=OBJECT_ACCEPT),
        )
        raise_for_backend_error(resp, context=f"get {blog_id}")
        return BlogPost.model_validate(resp.json())

    async def insert(self, *, title: str, content: str, author_id: str) -> BlogPost:
        """Insert an active post and return the stored row."""
        row = {
            "title": title,
            "content": content,
            "author_id": author_id,
            "status": BlogStatus.ACTIVE.value,
        }
        resp = await self._http().post(
            self.path,
            params={"select": "*"},
            headers=self._headers(
                Prefer="return=representation", Accept=OBJECT_ACCEPT
            ),
            json=row,
        )
        raise_for_backend_error(resp, context="insert")
        return BlogPost.model_validate(resp.json())

    async def update(
        self, blog_id: str, values: dict[str, Any], returning: bool = True
    ) -> BlogPost | None:
        """Update the row with *blog_id*.

        Returns the updated row, or None when *returning* is False (the
        backend is then asked not to send it back).
        """
        if returning:
            headers = self._headers(
                Prefer="return=representation", Accept=OBJECT_ACCEPT
            )
            params = {"id": f"eq.{blog_id}", "select": "*"}
        else:
            headers = self._headers(Prefer="return=minimal")
            params = {"id": f"eq.{blog_id}"}

        resp = await self._http().patch(
            self.path, params=params, headers=headers, json=values
        )
        raise_for_backend_error(resp, context=f"update {blog_id}")
        if not returning:
            return None
        return BlogPost.model_validate(resp.json())
