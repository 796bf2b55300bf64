"""Authentication-related exceptions."""

from typing import Any

from .base import BaseAppException


class InvalidCredentialsError(BaseAppException):
    """Raised when a login attempt is rejected."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message=message, status_code=401, error_code="INVALID_CREDENTIALS")


class RegistrationError(BaseAppException):
    """Raised when the backend refuses a registration."""

    def __init__(
        self,
        message: str = "Registration failed",
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code="REGISTRATION_FAILED",
            details=details,
        )
