"""Login, registration and logout controllers."""

from pydantic import ValidationError

from blogstore.models.forms import LoginForm, RegisterForm, form_error
from blogstore.store.session import SessionStore
from blogstore.views.blog import ViewResult


class AuthViews:
    """Controllers for the login/register pages and the logout action."""

    def __init__(self, session: SessionStore) -> None:
        self._session = session

    def require_user(self) -> bool:
        """Guard for protected views: True when someone is signed in."""
        return self._session.current_user() is not None

    def enter(self) -> None:
        """Called when a login/register page opens; drops stale errors."""
        self._session.clear_error()

    async def login(self, email: str, password: str) -> ViewResult:
        try:
            form = LoginForm(email=email, password=password)
        except ValidationError as e:
            return ViewResult(ok=False, error=form_error(e))

        action = await self._session.login(form.email, form.password)
        if not action.ok:
            return ViewResult(ok=False, error=action.error)
        return ViewResult(ok=True)

    async def register(
        self, email: str, password: str, confirm_password: str
    ) -> ViewResult:
        try:
            form = RegisterForm(
                email=email, password=password, confirm_password=confirm_password
            )
        except ValidationError as e:
            return ViewResult(ok=False, error=form_error(e))

        action = await self._session.register(form.email, form.password)
        if not action.ok:
            return ViewResult(ok=False, error=action.error)
        return ViewResult(ok=True)

    async def logout(self) -> ViewResult:
        action = await self._session.logout()
        if not action.ok:
            return ViewResult(ok=False, error=action.error)
        return ViewResult(ok=True)
