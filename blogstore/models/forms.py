"""Caller-side form models.

Forms are validated before anything is dispatched to a store, so invalid
input never reaches the backend in normal operation.  Each form raises
``pydantic.ValidationError`` whose first error carries the message to show
the user (see ``form_error``).
"""

import re

from pydantic import BaseModel, ValidationError, model_validator

_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")

TITLE_MIN_LENGTH = 3
CONTENT_MIN_LENGTH = 10
PASSWORD_MIN_LENGTH = 6


class BlogForm(BaseModel):
    """Create/edit form for a blog post. Values are stored stripped."""

    title: str = ""
    content: str = ""

    @model_validator(mode="after")
    def _check(self) -> "BlogForm":
        self.title = self.title.strip()
        self.content = self.content.strip()
        if not self.title:
            raise ValueError("Title is required")
        if len(self.title) < TITLE_MIN_LENGTH:
            raise ValueError(
                f"Title must be at least {TITLE_MIN_LENGTH} characters long"
            )
        if not self.content:
            raise ValueError("Content is required")
        if len(self.content) < CONTENT_MIN_LENGTH:
            raise ValueError(
                f"Content must be at least {CONTENT_MIN_LENGTH} characters long"
            )
        return self


class LoginForm(BaseModel):
    email: str = ""
    password: str = ""

    @model_validator(mode="after")
    def _check(self) -> "LoginForm":
        self.email = self.email.strip()
        if not self.email or not self.password:
            raise ValueError("All fields are required")
        if not _EMAIL_RE.search(self.email):
            raise ValueError("Please enter a valid email address")
        return self


class RegisterForm(BaseModel):
    email: str = ""
    password: str = ""
    confirm_password: str = ""

    @model_validator(mode="after")
    def _check(self) -> "RegisterForm":
        self.email = self.email.strip()
        if not self.email or not self.password or not self.confirm_password:
            raise ValueError("All fields are required")
        if not _EMAIL_RE.search(self.email):
            raise ValueError("Please enter a valid email address")
        if len(self.password) < PASSWORD_MIN_LENGTH:
            raise ValueError(
                f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
            )
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


def form_error(exc: ValidationError) -> str:
    """Return the first user-facing message from a form ValidationError."""
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    first = errors[0]
    ctx_error = first.get("ctx", {}).get("error")
    if ctx_error is not None:
        return str(ctx_error)
    return first["msg"]
