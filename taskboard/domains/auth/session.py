"""Authentication state shared by the router and every screen."""

import logging
from collections.abc import Callable
from enum import Enum

from taskboard.domains.auth.service import AuthService
from taskboard.exceptions.auth import RegistrationError
from taskboard.schemas.user import UserResponse

logger = logging.getLogger(__name__)

LOGIN_ERROR_MESSAGE = "Invalid email or password"
REGISTER_ERROR_MESSAGE = "Registration failed"


class SessionStatus(str, Enum):
    ANONYMOUS_LOADING = "anonymous-loading"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class AuthSession:
    """
    Holds ``{user, is_authenticated, loading, error}`` and the transitions
    between anonymous and authenticated.

    One instance is created per application and handed to whoever needs it;
    only the methods below mutate it. ``loading`` starts out true and stays
    true until :meth:`restore` has run, so routing can wait for it.

    :ivar user: The signed-in user, or None.
    :ivar is_authenticated: Whether a user is signed in.
    :ivar loading: True during the initial check and during :meth:`login`.
    :ivar error: Last user-facing authentication error, or None.
    """

    def __init__(self, auth_service: AuthService):
        self.auth_service = auth_service
        self.user: UserResponse | None = None
        self.is_authenticated = False
        self.loading = True
        self.error: str | None = None
        self._listeners: list[Callable[["AuthSession"], None]] = []

    @property
    def status(self) -> SessionStatus:
        if self.is_authenticated:
            return SessionStatus.AUTHENTICATED
        if self.loading:
            return SessionStatus.ANONYMOUS_LOADING
        return SessionStatus.ANONYMOUS

    def subscribe(self, listener: Callable[["AuthSession"], None]) -> Callable[[], None]:
        """Call ``listener`` after every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    async def restore(self) -> None:
        """Resume a previous session from the stored token, if there is one."""
        if self.auth_service.is_authenticated():
            try:
                self.user = await self.auth_service.get_current_user()
                self.is_authenticated = True
                logger.info("Session restored from stored token")
            except Exception as e:
                logger.error(f"Failed to fetch user data: {str(e)}")
                self.auth_service.logout()
                self.user = None
                self.is_authenticated = False
        self.loading = False
        self._notify()

    async def login(self, email: str, password: str) -> bool:
        """Sign in. Never raises; failures land in :attr:`error`.

        A failed attempt leaves the previous state untouched, including an
        already authenticated session and its stored token.
        """
        previous_token = self.auth_service.token_store.get()
        self.loading = True
        self.error = None
        self._notify()

        try:
            await self.auth_service.login(email, password)
            user = await self.auth_service.get_current_user()
        except Exception as e:
            logger.error(f"Login failed: {str(e)}")
            self._put_back_token(previous_token)
            self.error = LOGIN_ERROR_MESSAGE
            return False
        else:
            self.user = user
            self.is_authenticated = True
            logger.info("Login succeeded")
            return True
        finally:
            self.loading = False
            self._notify()

    def _put_back_token(self, token: str | None) -> None:
        if token is None:
            self.auth_service.token_store.clear()
        else:
            self.auth_service.token_store.set(token)

    async def register(self, email: str, password: str, full_name: str) -> None:
        """Create an account without signing in.

        Raises:
            Exception: Whatever the registration failed with, after
                :attr:`error` has been set.
        """
        self.error = None
        self._notify()
        try:
            await self.auth_service.register(email, password, full_name)
        except Exception as e:
            logger.error(f"Registration failed: {str(e)}")
            self.error = e.message if isinstance(e, RegistrationError) else REGISTER_ERROR_MESSAGE
            self._notify()
            raise

    def logout(self) -> None:
        """Sign out locally. No request is made."""
        self.auth_service.logout()
        self.user = None
        self.is_authenticated = False
        self.loading = False
        self.error = None
        logger.info("Logged out")
        self._notify()
