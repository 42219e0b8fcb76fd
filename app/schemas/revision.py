"""Revision ledger schemas."""

from __future__ import annotations

from uuid import UUID

from pydantic import Field

from .base import BaseModelSchema, BaseSchema


class RevisionRequestCreate(BaseSchema):
    order_id: UUID
    file_ids: list[UUID] = Field(default_factory=list)
    comments: str = ""
    requested_by: str | None = Field(None, max_length=255)


class RevisionRequestResponse(BaseModelSchema):
    order_id: UUID
    job_id: UUID
    file_ids: list[UUID]
    comments: str
    requested_by: str | None = None


class RevisionStatus(BaseSchema):
    order_id: UUID
    max_rounds: int
    used_rounds: int
    remaining_rounds: int


class RevisionConfigUpdate(BaseSchema):
    max_rounds: int = Field(..., ge=0, le=50)
