"""Project schemas for request/response serialization."""

from .base import BaseSchema, ResourceSchema


class ProjectBase(BaseSchema):
    """Base project schema with common fields."""

    name: str
    description: str | None = None


class ProjectCreate(ProjectBase):
    """Schema for creating a new project. The name is checked by the backend."""


class ProjectUpdate(BaseSchema):
    """Schema for updating a project. Only fields that were set are sent."""

    name: str | None = None
    description: str | None = None


class ProjectResponse(ResourceSchema):
    """Schema for project response."""

    name: str
    description: str | None = None
