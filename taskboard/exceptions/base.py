# ruff: noqa: D107
"""Base exception classes."""

from typing import Any


class BaseAppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str = "CLIENT_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}

        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "status_code": self.status_code,
            "error_code": self.error_code,
            "details": self.details,
        }


class ApiError(BaseAppException):
    """Exception raised when the backend answers with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        body: Any = None,
        message: str | None = None,
        error_code: str = "HTTP_ERROR",
    ):
        self.body = body
        super().__init__(
            message=message or f"Request failed with status {status_code}",
            status_code=status_code,
            error_code=error_code,
            details={"body": body} if body is not None else None,
        )

    @property
    def detail(self) -> Any:
        """The backend-provided ``detail`` field, if the body carries one."""
        if isinstance(self.body, dict):
            return self.body.get("detail")
        return None


class UnauthorizedError(ApiError):
    """Exception raised when the bearer token is missing or rejected."""

    def __init__(self, body: Any = None):
        super().__init__(401, body=body, message="Not authenticated", error_code="UNAUTHORIZED")


class NotFoundError(ApiError):
    """Exception raised when a resource is not found."""

    def __init__(self, body: Any = None):
        super().__init__(404, body=body, message="Resource not found", error_code="NOT_FOUND")


class NetworkError(BaseAppException):
    """Exception raised when no response was received at all."""

    def __init__(
        self, message: str = "Network request failed", details: dict[str, Any] | None = None
    ):
        super().__init__(message=message, error_code="NETWORK_ERROR", details=details)


class ResponseDecodeError(BaseAppException):
    """Exception raised when a response body does not match the expected schema."""

    def __init__(
        self, message: str = "Unexpected response body", details: dict[str, Any] | None = None
    ):
        super().__init__(message=message, error_code="DECODE_ERROR", details=details)


class MissingRouteParameterError(BaseAppException):
    """Exception raised when a screen is opened without a usable route parameter."""

    def __init__(self, name: str, value: Any = None):
        super().__init__(
            message=f"Missing or invalid route parameter: {name}",
            error_code="MISSING_ROUTE_PARAMETER",
            details={"name": name, "value": value},
        )


def api_error_for_status(status_code: int, body: Any = None) -> ApiError:
    """Build the most specific ApiError for an HTTP status."""
    if status_code == 401:
        return UnauthorizedError(body)
    if status_code == 404:
        return NotFoundError(body)
    return ApiError(status_code, body=body)
