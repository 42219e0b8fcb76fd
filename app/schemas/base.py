"""Base schemas for the application."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema class with common configuration.

    Fields are exposed in camelCase on the wire; snake_case names are still
    accepted on input.
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class BaseModelSchema(BaseSchema):
    """Base schema for database models."""

    id: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None


class ResponseSchema(BaseSchema):
    """Standard API response schema."""

    status: str
    message: Optional[str] = None
    data: Optional[Any] = None
