"""Exceptions package initialization."""

from .auth import InvalidCredentialsError, RegistrationError
from .base import (
    ApiError,
    BaseAppException,
    MissingRouteParameterError,
    NetworkError,
    NotFoundError,
    ResponseDecodeError,
    UnauthorizedError,
    api_error_for_status,
)

__all__ = [
    "BaseAppException",
    "ApiError",
    "UnauthorizedError",
    "NotFoundError",
    "NetworkError",
    "ResponseDecodeError",
    "MissingRouteParameterError",
    "InvalidCredentialsError",
    "RegistrationError",
    "api_error_for_status",
]
