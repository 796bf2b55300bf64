"""Base schemas for the application."""

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from taskboard.exceptions.base import ResponseDecodeError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class BaseSchema(BaseModel):
    """Base schema class with common configuration."""
    model_config = ConfigDict(from_attributes=True, extra="ignore")


class ResourceSchema(BaseSchema):
    """Base schema for records owned by the backend."""
    id: int


def decode(schema: type[SchemaT], body: Any) -> SchemaT:
    """Validate a response body against a schema."""
    try:
        return schema.model_validate(body)
    except PydanticValidationError as e:
        raise ResponseDecodeError(
            message=f"Unexpected {schema.__name__} payload",
            details={"errors": e.errors(include_url=False)},
        ) from e


def decode_list(schema: type[SchemaT], body: Any) -> list[SchemaT]:
    """Validate a response body holding an array of records."""
    try:
        return TypeAdapter(list[schema]).validate_python(body)
    except PydanticValidationError as e:
        raise ResponseDecodeError(
            message=f"Unexpected {schema.__name__} list payload",
            details={"errors": e.errors(include_url=False)},
        ) from e
