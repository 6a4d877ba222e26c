"""Shared model types."""

from enum import Enum


class RequestStatus(str, Enum):
    """Request lifecycle of a store: idle, waiting on the backend, or failed."""

    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
