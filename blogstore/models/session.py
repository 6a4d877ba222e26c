"""Authentication session models."""

import time

from pydantic import BaseModel

from blogstore.models.common import RequestStatus


class User(BaseModel):
    """Authenticated user as reported by the identity provider."""

    id: str
    email: str | None = None


class Session(BaseModel):
    """Tokens issued by the identity provider for a signed-in user."""

    access_token: str
    refresh_token: str
    expires_at: int  # unix seconds
    user: User

    def is_expired(self, margin: int = 0, now: float | None = None) -> bool:
        """Return True if the access token expires within *margin* seconds."""
        current = time.time() if now is None else now
        return self.expires_at - margin <= current


class SessionState(BaseModel):
    """State held by the session store."""

    user: User | None = None
    status: RequestStatus = RequestStatus.IDLE
    error_message: str | None = None
