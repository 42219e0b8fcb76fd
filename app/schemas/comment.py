"""File comment schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field

from models.file_comment import CommentAuthorRole, CommentStatus

from .base import BaseSchema


class FileCommentCreate(BaseSchema):
    """Comment posted from the public delivery page.

    Clients may flag their comment as open but cannot resolve anything.
    """

    author_id: str = Field(..., min_length=1, max_length=128)
    author_name: str = Field(..., min_length=1, max_length=255)
    author_role: CommentAuthorRole
    message: str = ""
    status: Literal["open"] | None = None


class InternalCommentCreate(BaseSchema):
    """Reply posted from the dashboard; the author comes from the session."""

    message: str = ""
    status: CommentStatus | None = None


class CommentStatusUpdate(BaseSchema):
    status: CommentStatus


class FileCommentResponse(BaseSchema):
    id: UUID
    file_id: UUID
    order_id: UUID | None = None
    author_id: str
    author_name: str
    author_role: str
    message: str
    status: str | None = None
    created_at: datetime
