"""Shared HTTP client utilities: reusable httpx client for the backend."""

import logging
from typing import Any

import httpx

from blogstore.config import Settings, get_settings
from blogstore.services.errors import AuthError, BackendError, NotFoundError

logger = logging.getLogger(__name__)

# PostgREST code for "single object requested, zero (or many) rows returned"
NO_ROWS_CODE = "PGRST116"

# Module-level shared client (created lazily, lives for the process lifetime)
_client: httpx.AsyncClient | None = None


def create_client(settings: Settings | None = None) -> httpx.AsyncClient:
    """Create an httpx.AsyncClient bound to the backend URL."""
    settings = settings or get_settings()
    return httpx.AsyncClient(
        base_url=settings.supabase_url,
        timeout=settings.request_timeout,
    )


def get_shared_client() -> httpx.AsyncClient:
    """Return a shared httpx.AsyncClient, creating it on first call."""
    global _client
    if _client is None or _client.is_closed:
        _client = create_client()
    return _client


async def close_shared_client() -> None:
    """Close the shared client if one was created."""
    global _client
    if _client is not None and not _client.is_closed:
        await _client.aclose()
    _client = None


def backend_headers(
    anon_key: str, access_token: str | None = None
) -> dict[str, str]:
    """Build standard backend request headers.

    The anon key is always sent as ``apikey``.  The bearer token is the
    user's access token when signed in, otherwise the anon key itself.
    """
    token = access_token or anon_key
    headers: dict[str, str] = {"apikey": anon_key}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def parse_content_range_total(header: str | None) -> int:
    """Extract the exact total from a ``Content-Range`` header.

    ``"0-9/25"`` -> 25, ``"*/0"`` -> 0.  A missing or unknown total (``*``)
    counts as 0.
    """
    if not header or "/" not in header:
        return 0
    total = header.rsplit("/", 1)[1].strip()
    try:
        return int(total)
    except ValueError:
        return 0


def _error_message(body: Any, fallback: str) -> str:
    if isinstance(body, dict):
        for key in ("message", "msg", "error_description", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return fallback


def _request_path(resp: httpx.Response) -> str:
    try:
        return resp.request.url.path
    except RuntimeError:
        # Response built without a request (e.g. in tests)
        return "?"


def raise_for_backend_error(
    resp: httpx.Response, *, context: str = "", auth: bool = False
) -> None:
    """Raise a BackendError subclass for a non-2xx backend response.

    Args:
        resp: The backend response.
        context: Description for log messages.
        auth: Whether the response came from the identity provider, in
            which case failures are raised as AuthError.
    """
    if resp.is_success:
        return

    try:
        body = resp.json()
    except ValueError:
        body = None
    fallback = resp.reason_phrase or f"HTTP {resp.status_code}"
    message = _error_message(body, fallback)
    code = body.get("code") if isinstance(body, dict) else None
    if code is not None:
        code = str(code)

    logger.warning(
        "Backend %d for %s%s: %s",
        resp.status_code,
        _request_path(resp),
        f" ({context})" if context else "",
        message,
    )

    if code == NO_ROWS_CODE or (resp.status_code == 406 and not auth):
        raise NotFoundError(message, status_code=resp.status_code, code=code)
    if auth:
        raise AuthError(message, status_code=resp.status_code, code=code)
    raise BackendError(message, status_code=resp.status_code, code=code)
