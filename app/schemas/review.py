"""Client review schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from .base import BaseSchema


class ReviewSubmit(BaseSchema):
    # Range is enforced by ReviewService so the error carries VALIDATION_ERROR
    rating: int
    review: str | None = None
    submitted_by: str | None = Field(None, max_length=255)
    submitted_by_email: str | None = Field(None, max_length=255)


class ReviewResponse(BaseSchema):
    id: UUID
    job_id: UUID
    rating: int
    review: str | None = None
    submitted_by: str | None = None
    submitted_by_email: str | None = None
    submitted_at: datetime
    created_at: datetime
