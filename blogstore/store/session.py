"""Session store: who is signed in, plus request status."""

from blogstore.models.common import RequestStatus
from blogstore.models.session import SessionState, User
from blogstore.services.auth import AuthClient
from blogstore.store.base import FULFILLED, PENDING, REJECTED, Action, Store

STORE_NAME = "auth"

CHECK_SESSION = "check_session"
LOGIN = "login"
REGISTER = "register"
LOGOUT = "logout"
CLEAR_ERROR = f"{STORE_NAME}/clear_error"

_OPERATIONS = {CHECK_SESSION, LOGIN, REGISTER, LOGOUT}


def session_reducer(state: SessionState, action: Action) -> SessionState:
    if action.type == CLEAR_ERROR:
        status = (
            RequestStatus.IDLE if state.status is RequestStatus.ERROR else state.status
        )
        return state.model_copy(update={"status": status, "error_message": None})

    parts = action.type.split("/")
    if len(parts) != 3 or parts[0] != STORE_NAME or parts[1] not in _OPERATIONS:
        return state
    _, operation, phase = parts

    if phase == PENDING:
        return state.model_copy(
            update={"status": RequestStatus.LOADING, "error_message": None}
        )
    if phase == REJECTED:
        return state.model_copy(
            update={
                "status": RequestStatus.ERROR,
                "error_message": action.error or "Request failed",
            }
        )
    if phase == FULFILLED:
        user = None if operation == LOGOUT else action.payload
        return state.model_copy(update={"status": RequestStatus.IDLE, "user": user})
    return state


class SessionStore(Store[SessionState]):
    """Mediates sign-in, registration, sign-out and session restoration."""

    def __init__(self, auth: AuthClient) -> None:
        super().__init__(STORE_NAME, SessionState(), session_reducer)
        self._auth = auth

    def current_user(self) -> User | None:
        """Session reader handed to stores that need the acting identity."""
        return self.state.user

    async def check_session(self) -> Action:
        """Restore a previously issued session, if there is a valid one."""
        return await self.run(CHECK_SESSION, self._auth.restore_session)

    async def login(self, email: str, password: str) -> Action:
        return await self.run(LOGIN, lambda: self._auth.sign_in(email, password))

    async def register(self, email: str, password: str) -> Action:
        """Create an account.

        The fulfilled payload is None when the provider wants the address
        confirmed before issuing a session.
        """
        return await self.run(REGISTER, lambda: self._auth.sign_up(email, password))

    async def logout(self) -> Action:
        return await self.run(LOGOUT, self._auth.sign_out)

    def clear_error(self) -> Action:
        return self.dispatch(Action(CLEAR_ERROR))
