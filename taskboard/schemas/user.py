"""User and authentication schemas."""

from pydantic import ConfigDict

from .base import BaseSchema


class UserCreate(BaseSchema):
    """Schema for registering a new user."""

    email: str
    password: str
    full_name: str


class UserResponse(BaseSchema):
    """Schema for the authenticated user, as returned by ``/api/users/me``."""

    id: int | str
    email: str
    full_name: str | None = None

    # The backend may send more than the client needs
    model_config = ConfigDict(extra="allow")


class Token(BaseSchema):
    """Schema for the login response."""

    access_token: str
    token_type: str = "bearer"
