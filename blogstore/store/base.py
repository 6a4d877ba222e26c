"""Minimal observable store: a state record, a reducer, and subscribers.

A store owns exactly one state value.  The only way to change it is
``dispatch``, which runs the reducer and then notifies subscribers.
``run`` wraps an awaitable backend call in the three-phase
pending -> fulfilled | rejected sequence of actions.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar("S")

PENDING = "pending"
FULFILLED = "fulfilled"
REJECTED = "rejected"


class OperationFailed(Exception):
    """Raised by ``Action.unwrap`` for a rejected operation."""


@dataclass(frozen=True)
class Action:
    """Something that happened, handed to the reducer."""

    type: str
    payload: Any = None
    error: str | None = None

    @property
    def phase(self) -> str:
        return self.type.rsplit("/", 1)[-1]

    @property
    def ok(self) -> bool:
        return self.phase != REJECTED

    def unwrap(self) -> Any:
        """Return the payload, or raise OperationFailed if rejected."""
        if not self.ok:
            raise OperationFailed(self.error or "Operation failed")
        return self.payload


Reducer = Callable[[S, Action], S]
Listener = Callable[[S], None]


def error_message(exc: BaseException) -> str:
    """Normalize any failure into the single string shown to the user."""
    message = getattr(exc, "message", None) or str(exc)
    return message or exc.__class__.__name__


class Store(Generic[S]):
    """Holds a state record that only the reducer may replace."""

    def __init__(self, name: str, initial_state: S, reducer: Reducer) -> None:
        self.name = name
        self._state = initial_state
        self._reducer = reducer
        self._listeners: list[Listener] = []

    @property
    def state(self) -> S:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with the new state after every dispatch.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> Action:
        """Apply *action* through the reducer and notify subscribers."""
        self._state = self._reducer(self._state, action)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("Listener failed on %s", action.type)
        return action

    async def run(
        self, operation: str, call: Callable[[], Awaitable[Any]]
    ) -> Action:
        """Run *call* as ``<name>/<operation>`` with pending/fulfilled/rejected.

        Every exception raised by *call* becomes a rejected action carrying
        a single message; nothing propagates to the caller.  Task
        cancellation is not an Exception and is left alone.
        """
        type_prefix = f"{self.name}/{operation}"
        self.dispatch(Action(f"{type_prefix}/{PENDING}"))
        logger.debug("%s pending", type_prefix)
        try:
            payload = await call()
        except Exception as e:
            message = error_message(e)
            logger.warning("%s rejected: %s", type_prefix, message)
            return self.dispatch(Action(f"{type_prefix}/{REJECTED}", error=message))
        return self.dispatch(Action(f"{type_prefix}/{FULFILLED}", payload=payload))
