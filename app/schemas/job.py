"""Job, order and deliverable file schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from models.job import JobStatus

from .base import BaseModelSchema, BaseSchema


class CustomerSummary(BaseSchema):
    first_name: str
    last_name: str
    company: str | None = None


class JobCreate(BaseSchema):
    """Schema for creating a job (minimal, the booking wizard lives elsewhere)."""

    address: str = Field(..., min_length=1, max_length=500)
    customer_id: UUID | None = None
    status: JobStatus = JobStatus.booked
    notes: str | None = None

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Address cannot be empty or only whitespace")
        return v


class JobResponse(BaseModelSchema):
    partner_id: str
    job_number: str
    address: str
    status: str
    customer_id: UUID | None = None
    has_delivery_link: bool = False


class PublicJobResponse(BaseSchema):
    """Job as shown to the end customer; never exposes the internal id."""

    job_id: str
    address: str
    status: str
    customer: CustomerSummary | None = None


class OrderCreate(BaseSchema):
    max_revision_rounds: int | None = Field(None, ge=0, le=50)


class OrderResponse(BaseModelSchema):
    job_id: UUID | None = None
    order_number: str
    status: str
    max_revision_rounds: int
    used_revision_rounds: int


class FileCreate(BaseSchema):
    """Metadata handed over by the storage collaborator after an upload."""

    order_id: UUID
    file_name: str = Field(..., min_length=1, max_length=500)
    original_name: str = Field(..., min_length=1, max_length=500)
    file_size: int = Field(0, ge=0)
    mime_type: str = Field(..., min_length=1, max_length=100)
    download_url: str | None = Field(None, max_length=2000)
    folder_path: str | None = None
    uploaded_at: datetime | None = None
    notes: str | None = None


class FileNotesUpdate(BaseSchema):
    notes: str | None = None


class FileResponse(BaseModelSchema):
    order_id: UUID
    folder_path: str | None = None
    file_name: str
    original_name: str
    file_size: int
    mime_type: str
    download_url: str | None = None
    uploaded_at: datetime
    notes: str | None = None


class DeliverySendRequest(BaseSchema):
    recipient_email: EmailStr
    subject: str | None = Field(None, max_length=500)
    message: str | None = Field(None, max_length=5000)


class DeliveryLinkResponse(BaseSchema):
    job_id: UUID
    token: str
    url: str
