"""Folder tree schemas."""

from __future__ import annotations

from uuid import UUID

from pydantic import Field

from .base import BaseModelSchema, BaseSchema


class FolderCreate(BaseSchema):
    """Schema for creating a folder under ``parent_path`` (root when omitted)."""

    parent_path: str | None = None
    name: str = Field(..., max_length=255)
    order_id: UUID | None = None


class FolderUpdate(BaseSchema):
    """Rename and/or toggle visibility of the folder at ``folder_path``."""

    folder_path: str
    display_name: str | None = Field(None, max_length=255)
    is_visible: bool | None = None


class FolderReorder(BaseSchema):
    folder_paths: list[str] = Field(..., min_length=1)


class FolderResponse(BaseModelSchema):
    job_id: UUID
    parent_id: UUID | None = None
    order_id: UUID | None = None
    folder_path: str = Field(validation_alias="path")
    parent_path: str | None = None
    depth: int
    editor_folder_name: str
    partner_folder_name: str | None = None
    display_name: str
    is_visible: bool
    display_order: int


class FolderDeleteResult(BaseSchema):
    folder_path: str
    folders_deleted: int
    files_deleted: int
