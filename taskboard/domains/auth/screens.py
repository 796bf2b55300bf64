"""Sign-in and sign-up screens."""

import logging
from typing import Any

from taskboard.domains.auth.session import AuthSession
from taskboard.shared.screen import Navigate, Screen

logger = logging.getLogger(__name__)

LOGIN_ROUTE = "/"
HOME_ROUTE = "/dashboard"
REGISTRATION_SUCCESS_MESSAGE = "Registration successful! Please sign in."


class LoginScreen(Screen[None]):
    """Email/password sign-in."""

    def __init__(
        self,
        session: AuthSession,
        navigate: Navigate | None = None,
        state: dict[str, Any] | None = None,
    ):
        super().__init__(navigate)
        self.session = session
        self.email = ""
        self.password = ""
        # Message handed over by the register screen
        self.success_message: str | None = (state or {}).get("message")

    @property
    def should_load(self) -> bool:
        return False

    @property
    def signing_in(self) -> bool:
        return self.session.loading

    @property
    def can_submit(self) -> bool:
        return bool(self.email and self.password) and not self.session.loading

    async def submit(self) -> bool:
        """Sign in, then head for the dashboard.

        The router sends the user back here if the sign-in failed.
        """
        ok = await self.session.login(self.email, self.password)
        self.error = self.session.error
        self._notify()
        self.navigate(HOME_ROUTE)
        return ok


class RegisterScreen(Screen[None]):
    """Account creation. Does not sign the user in."""

    def __init__(self, session: AuthSession, navigate: Navigate | None = None):
        super().__init__(navigate)
        self.session = session
        self.email = ""
        self.password = ""
        self.full_name = ""
        self.submitting = False

    @property
    def should_load(self) -> bool:
        return False

    @property
    def can_submit(self) -> bool:
        return bool(self.email and self.password and self.full_name) and not self.submitting

    async def submit(self) -> bool:
        if not self.can_submit:
            return False

        self.submitting = True
        self.error = None
        self._notify()
        try:
            await self.session.register(self.email, self.password, self.full_name)
        except Exception:
            self.error = self.session.error
            return False
        finally:
            self.submitting = False
            self._notify()

        self.navigate(LOGIN_ROUTE, {"message": REGISTRATION_SUCCESS_MESSAGE})
        return True
