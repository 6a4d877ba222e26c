"""Errors raised by the backend service clients."""


class BackendError(Exception):
    """The backend rejected a request or returned something unusable."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class AuthError(BackendError):
    """The identity provider refused the request."""


class AuthenticationRequiredError(BackendError):
    """An operation needs a signed-in user and there is none."""

    def __init__(self, message: str = "User not authenticated") -> None:
        super().__init__(message, status_code=401)


class NotFoundError(BackendError):
    """A single-row read matched no row (missing id or non-active post)."""
