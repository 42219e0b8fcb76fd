"""Public delivery page payload."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from .base import BaseSchema
from .job import PublicJobResponse
from .review import ReviewResponse
from .revision import RevisionStatus


class DeliveryFileResponse(BaseSchema):
    id: UUID
    order_id: UUID
    folder_path: str | None = None
    file_name: str
    original_name: str
    file_size: int
    mime_type: str
    download_url: str
    uploaded_at: datetime
    has_open_comments: bool = False


class OrderFilesResponse(BaseSchema):
    order_id: UUID
    order_number: str | None = None
    files: list[DeliveryFileResponse]


class FolderFilesResponse(BaseSchema):
    folder_path: str | None = None
    parent_path: str | None = None
    depth: int
    editor_folder_name: str
    partner_folder_name: str | None = None
    display_name: str
    is_visible: bool
    order_id: UUID | None = None
    file_count: int
    files: list[DeliveryFileResponse]


class Branding(BaseSchema):
    business_name: str | None = None
    logo_url: str | None = None


class DeliveryPayload(BaseSchema):
    job: PublicJobResponse
    completed_files: list[OrderFilesResponse]
    folders: list[FolderFilesResponse]
    revision_status: list[RevisionStatus]
    job_review: ReviewResponse | None = None
    branding: Branding | None = None


class DeliverablesView(BaseSchema):
    """Internal dashboard view, unfiltered by visibility."""

    view: str
    folders: list[FolderFilesResponse] | None = None
    orders: list[OrderFilesResponse] | None = None
    total_files: int
