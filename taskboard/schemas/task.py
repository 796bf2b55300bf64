"""Task schemas for request/response serialization."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import field_validator

from .base import BaseSchema, ResourceSchema


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


def _as_utc(v: datetime | None) -> datetime | None:
    if v is not None and v.tzinfo is None:
        return v.replace(tzinfo=UTC)
    return v


class TaskBase(BaseSchema):
    """Base task schema with common fields."""

    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    project_id: int | None = None
    due_date: datetime | None = None
    assigned_user_id: int | None = None

    @field_validator("due_date")
    @classmethod
    def validate_due_date(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v)


class TaskCreate(TaskBase):
    """Schema for creating a new task. The title is checked by the backend."""


class TaskUpdate(BaseSchema):
    """Schema for updating a task. Only fields that were set are sent."""

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    project_id: int | None = None
    due_date: datetime | None = None
    assigned_user_id: int | None = None

    @field_validator("due_date")
    @classmethod
    def validate_due_date(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v)


class TaskResponse(ResourceSchema):
    """Schema for task response."""

    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    project_id: int | None = None
    due_date: datetime | None = None
    assigned_user_id: int | None = None

    @field_validator("due_date")
    @classmethod
    def validate_due_date(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v)


class TaskFilter(BaseSchema):
    """Schema for filtering tasks on the server."""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    project_id: int | None = None

    def to_params(self) -> dict[str, str | int]:
        """Query parameters for the set filters, in declaration order."""
        return self.model_dump(mode="json", exclude_none=True)
