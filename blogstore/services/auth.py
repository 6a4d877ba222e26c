"""Identity provider client (GoTrue-compatible auth API).

Usage:
    auth = AuthClient(SessionStorage(settings.session_file))
    user = await auth.sign_in("me@example.com", "secret")

The client holds the current session in memory and mirrors it to
``SessionStorage`` so that ``restore_session`` can pick it up on the next
start.
"""

import logging
import time
from typing import Any

import httpx

from blogstore.config import get_settings
from blogstore.models.session import Session, User
from blogstore.services.errors import AuthError
from blogstore.services.http_client import (
    backend_headers,
    get_shared_client,
    raise_for_backend_error,
)
from blogstore.services.session_storage import SessionStorage

logger = logging.getLogger(__name__)

AUTH_PATH = "/auth/v1"


def _parse_session(data: dict[str, Any]) -> Session | None:
    """Build a Session from a token response, or None if no token was issued."""
    access_token = data.get("access_token")
    if not access_token:
        return None
    expires_at = data.get("expires_at")
    if expires_at is None:
        expires_at = int(time.time()) + int(data.get("expires_in", 3600))
    return Session(
        access_token=access_token,
        refresh_token=data.get("refresh_token", ""),
        expires_at=int(expires_at),
        user=User.model_validate(data["user"]),
    )


class AuthClient:
    """Sign-in, sign-up, sign-out and session lookup against the auth API."""

    def __init__(
        self,
        storage: SessionStorage,
        client: httpx.AsyncClient | None = None,
        refresh_margin: int | None = None,
        anon_key: str | None = None,
    ) -> None:
        self._storage = storage
        self._client = client
        self._refresh_margin = (
            get_settings().session_refresh_margin
            if refresh_margin is None
            else refresh_margin
        )
        self._anon_key = (
            get_settings().supabase_anon_key if anon_key is None else anon_key
        )
        self._session: Session | None = None

    def _http(self) -> httpx.AsyncClient:
        return self._client or get_shared_client()

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def access_token(self) -> str | None:
        return self._session.access_token if self._session else None

    def _set_session(self, session: Session | None) -> None:
        self._session = session
        if session is None:
            self._storage.clear()
        else:
            self._storage.save(session)

    async def _token(self, grant_type: str, body: dict[str, str]) -> Session:
        resp = await self._http().post(
            f"{AUTH_PATH}/token",
            params={"grant_type": grant_type},
            headers=backend_headers(self._anon_key),
            json=body,
        )
        raise_for_backend_error(resp, context=f"token:{grant_type}", auth=True)
        session = _parse_session(resp.json())
        if session is None:
            raise AuthError("No session returned by the identity provider")
        return session

    async def sign_in(self, email: str, password: str) -> User:
        """Exchange email and password for a session."""
        session = await self._token("password", {"email": email, "password": password})
        self._set_session(session)
        logger.info("Signed in %s", session.user.email or session.user.id)
        return session.user

    async def sign_up(self, email: str, password: str) -> User | None:
        """Register a new account.

        Returns the signed-in user when the provider issues a session
        immediately, or None when the account awaits email confirmation.
        """
        resp = await self._http().post(
            f"{AUTH_PATH}/signup",
            headers=backend_headers(self._anon_key),
            json={"email": email, "password": password},
        )
        raise_for_backend_error(resp, context="signup", auth=True)
        session = _parse_session(resp.json())
        if session is None:
            logger.info("Registered %s, awaiting email confirmation", email)
            return None
        self._set_session(session)
        logger.info("Registered and signed in %s", email)
        return session.user

    async def sign_out(self) -> None:
        """End the session on the provider and forget it locally.

        A 401 means the token had already expired and is not treated as an
        error.  Any other failure leaves the session in place, so the caller
        is still signed in and can retry.
        """
        session = self._session
        if session is None:
            self._set_session(None)
            return
        resp = await self._http().post(
            f"{AUTH_PATH}/logout",
            headers=backend_headers(self._anon_key, session.access_token),
        )
        if resp.status_code != 401:
            raise_for_backend_error(resp, context="logout", auth=True)
        self._set_session(None)
        logger.info("Signed out %s", session.user.email or session.user.id)

    async def get_user(self) -> User | None:
        """Return the user behind the current access token, or None."""
        if self._session is None:
            return None
        resp = await self._http().get(
            f"{AUTH_PATH}/user",
            headers=backend_headers(self._anon_key, self._session.access_token),
        )
        raise_for_backend_error(resp, context="user", auth=True)
        return User.model_validate(resp.json())

    async def refresh_session(self) -> Session:
        """Trade the refresh token for a new session."""
        if self._session is None:
            raise AuthError("No session to refresh")
        session = await self._token(
            "refresh_token", {"refresh_token": self._session.refresh_token}
        )
        self._set_session(session)
        return session

    async def restore_session(self) -> User | None:
        """Pick up a previously issued session from storage.

        Refreshes the stored session when it is about to expire and checks it
        with the provider.  A session the provider rejects is discarded and
        None is returned.  Other failures propagate with no session held in
        memory; the stored copy is kept for the next attempt.
        """
        stored = self._storage.load()
        if stored is None:
            self._session = None
            return None

        self._session = stored
        try:
            if stored.is_expired(self._refresh_margin):
                logger.debug("Stored session near expiry, refreshing")
                await self.refresh_session()
            user = await self.get_user()
        except AuthError as e:
            logger.info("Discarding stored session: %s", e)
            self._set_session(None)
            return None
        except Exception:
            self._session = None
            raise

        if user is not None and self._session is not None:
            self._set_session(self._session.model_copy(update={"user": user}))
        return user
