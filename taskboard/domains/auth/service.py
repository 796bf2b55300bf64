"""Auth service: login, registration and the current user."""

import logging
from typing import Any

from taskboard.core.http import ApiClient
from taskboard.core.storage import TokenStore
from taskboard.exceptions.auth import InvalidCredentialsError, RegistrationError
from taskboard.exceptions.base import ApiError
from taskboard.schemas.base import decode
from taskboard.schemas.user import Token, UserCreate, UserResponse

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/auth/login"
REGISTER_PATH = "/api/auth/register"
CURRENT_USER_PATH = "/api/users/me"


class AuthService:
    """Service class for authentication calls."""

    def __init__(self, client: ApiClient, token_store: TokenStore):
        self.client = client
        self.token_store = token_store

    async def login(self, username: str, password: str) -> Token:
        """Exchange credentials for a bearer token and persist it.

        The backend expects an OAuth2 password form, so the credentials are
        sent form-urlencoded rather than as JSON.

        Raises:
            InvalidCredentialsError: The backend rejected the credentials.
        """
        try:
            body = await self.client.post_form(
                LOGIN_PATH, data={"username": username, "password": password}
            )
        except ApiError as e:
            if e.status_code in (400, 401, 403, 422):
                raise InvalidCredentialsError() from e
            raise

        token = decode(Token, body)
        self.token_store.set(token.access_token)
        logger.info("Stored new session token")
        return token

    async def register(self, email: str, password: str, full_name: str) -> Any:
        """Create an account. Does not log the user in.

        Raises:
            RegistrationError: The backend refused the registration; carries
                the backend ``detail`` message when it sent one.
        """
        payload = UserCreate(email=email, password=password, full_name=full_name)
        try:
            return await self.client.post(REGISTER_PATH, json=payload.model_dump())
        except ApiError as e:
            detail = e.detail if isinstance(e.detail, str) else None
            raise RegistrationError(
                message=detail or "Registration failed",
                status_code=e.status_code,
                details={"body": e.body},
            ) from e

    async def get_current_user(self) -> UserResponse:
        body = await self.client.get(CURRENT_USER_PATH)
        return decode(UserResponse, body)

    def logout(self) -> None:
        """Forget the stored token. No request is made."""
        self.token_store.clear()

    def is_authenticated(self) -> bool:
        return self.token_store.has_token()
