"""Job API controller: jobs, orders, files and delivery from the dashboard."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_current_user, get_db, require_partner_owner, validate_token
from app.domains.comment.service import CommentService
from app.domains.delivery.service import DeliveryService
from app.domains.job.service import JobService
from app.domains.review.service import ReviewService
from app.domains.revision.service import RevisionService
from app.schemas.base import ResponseSchema
from app.schemas.comment import CommentStatusUpdate, FileCommentResponse, InternalCommentCreate
from app.schemas.delivery import DeliverablesView
from app.schemas.job import (
    DeliveryLinkResponse,
    DeliverySendRequest,
    FileCreate,
    FileNotesUpdate,
    FileResponse,
    JobCreate,
    JobResponse,
    OrderCreate,
    OrderResponse,
)
from app.schemas.review import ReviewResponse
from app.schemas.revision import RevisionRequestResponse
from app.shared.pagination import PaginationParams, pagination_params
from models import CommentAuthorRole, UserRole
from models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/jobs",
    tags=["jobs"],
    dependencies=[Depends(validate_token)],
)


@router.post("", response_model=ResponseSchema, status_code=status.HTTP_201_CREATED)
async def create_job(
    job_data: JobCreate,
    current_user: User = Depends(require_partner_owner),
    db: AsyncSession = Depends(get_db),
):
    """Create a job."""
    job = await JobService(db).create_job(job_data, current_user)

    return ResponseSchema(
        status="success",
        message="Job created successfully",
        data=JobResponse.model_validate(job).model_dump(by_alias=True),
    )


@router.get("", response_model=ResponseSchema)
async def list_jobs(
    pagination: PaginationParams = Depends(pagination_params),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get paginated list of the tenant's jobs."""
    result = await JobService(db).list_jobs(current_user, pagination)

    return ResponseSchema(
        status="success",
        message="Jobs retrieved successfully",
        data=result.serialize(JobResponse),
    )


@router.get("/{job_id}", response_model=ResponseSchema)
async def get_job(
    job_id: UUID = Path(..., description="Job ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    job = await JobService(db).get_job_for_user(job_id, current_user)

    return ResponseSchema(
        status="success",
        message="Job retrieved successfully",
        data=JobResponse.model_validate(job).model_dump(by_alias=True),
    )


# Orders
@router.post("/{job_id}/orders", response_model=ResponseSchema, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_data: OrderCreate,
    job_id: UUID = Path(..., description="Job ID"),
    current_user: User = Depends(require_partner_owner),
    db: AsyncSession = Depends(get_db),
):
    """Create an order; revision rounds default to the partner setting."""
    service = JobService(db)
    job = await service.get_job_for_user(job_id, current_user)
    order = await service.create_order(job, order_data, current_user)

    return ResponseSchema(
        status="success",
        message="Order created successfully",
        data=OrderResponse.model_validate(order).model_dump(by_alias=True),
    )


@router.get("/{job_id}/orders", response_model=ResponseSchema)
async def list_orders(
    job_id: UUID = Path(..., description="Job ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = JobService(db)
    job = await service.get_job_for_user(job_id, current_user)
    orders = await service.list_orders(job.id)

    return ResponseSchema(
        status="success",
        message="Orders retrieved successfully",
        data=[OrderResponse.model_validate(order).model_dump(by_alias=True) for order in orders],
    )


# Files
@router.post("/{job_id}/files", response_model=ResponseSchema, status_code=status.HTTP_201_CREATED)
async def register_file(
    file_data: FileCreate,
    job_id: UUID = Path(..., description="Job ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Register an uploaded file; missing folders on its path are created."""
    service = JobService(db)
    job = await service.get_job_for_user(job_id, current_user)
    file = await service.register_file(job, file_data)

    return ResponseSchema(
        status="success",
        message="File registered successfully",
        data=FileResponse.model_validate(file).model_dump(by_alias=True),
    )


@router.get("/{job_id}/files", response_model=ResponseSchema)
async def list_files(
    job_id: UUID = Path(..., description="Job ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """All registered files, including ones not yet ready for delivery."""
    service = JobService(db)
    job = await service.get_job_for_user(job_id, current_user)
    files = await service.list_files(job.id)

    return ResponseSchema(
        status="success",
        message="Files retrieved successfully",
        data=[FileResponse.model_validate(file).model_dump(by_alias=True) for file in files],
    )


@router.patch("/{job_id}/files/{file_id}", response_model=ResponseSchema)
async def update_file_notes(
    notes_data: FileNotesUpdate,
    job_id: UUID = Path(..., description="Job ID"),
    file_id: UUID = Path(..., description="File ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = JobService(db)
    job = await service.get_job_for_user(job_id, current_user)
    file = await service.update_file_notes(job.id, file_id, notes_data.notes)

    return ResponseSchema(
        status="success",
        message="File updated successfully",
        data=FileResponse.model_validate(file).model_dump(by_alias=True),
    )


# Comments
@router.get("/{job_id}/files/{file_id}/comments", response_model=ResponseSchema)
async def list_file_comments(
    job_id: UUID = Path(..., description="Job ID"),
    file_id: UUID = Path(..., description="File ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = JobService(db)
    job = await service.get_job_for_user(job_id, current_user)
    file = await service.get_file(job.id, file_id)
    comments = await CommentService(db).list_comments(file.id)

    return ResponseSchema(
        status="success",
        message="Comments retrieved successfully",
        data=[FileCommentResponse.model_validate(c).model_dump(by_alias=True) for c in comments],
    )


@router.post(
    "/{job_id}/files/{file_id}/comments",
    response_model=ResponseSchema,
    status_code=status.HTTP_201_CREATED,
)
async def add_file_comment(
    comment_data: InternalCommentCreate,
    job_id: UUID = Path(..., description="Job ID"),
    file_id: UUID = Path(..., description="File ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Reply on a file thread as the signed-in team member."""
    service = JobService(db)
    job = await service.get_job_for_user(job_id, current_user)
    file = await service.get_file(job.id, file_id)

    role = (
        CommentAuthorRole.editor
        if current_user.role == UserRole.editor.value
        else CommentAuthorRole.photographer
    )
    comment = await CommentService(db).add_comment(
        file,
        author_id=current_user.firebase_uid,
        author_name=current_user.display_name or current_user.email,
        author_role=role,
        message=comment_data.message,
        status=comment_data.status,
    )

    return ResponseSchema(
        status="success",
        message="Comment added successfully",
        data=FileCommentResponse.model_validate(comment).model_dump(by_alias=True),
    )


@router.patch("/{job_id}/comments/{comment_id}", response_model=ResponseSchema)
async def update_comment_status(
    status_data: CommentStatusUpdate,
    job_id: UUID = Path(..., description="Job ID"),
    comment_id: UUID = Path(..., description="Comment ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Move a comment to open, in_progress or resolved."""
    job = await JobService(db).get_job_for_user(job_id, current_user)
    comment = await CommentService(db).update_comment_status(job.id, comment_id, status_data.status)

    return ResponseSchema(
        status="success",
        message="Comment updated successfully",
        data=FileCommentResponse.model_validate(comment).model_dump(by_alias=True),
    )


# Deliverables and delivery
@router.get("/{job_id}/deliverables", response_model=ResponseSchema)
async def get_deliverables(
    job_id: UUID = Path(..., description="Job ID"),
    view: str = Query("folder", pattern="^(folder|order)$", description="Grouping"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Deliverable files grouped by folder or by order, hidden folders included."""
    job = await JobService(db).get_job_for_user(job_id, current_user)
    deliverables = await DeliveryService(db).build_deliverables_view(job, view)

    return ResponseSchema(
        status="success",
        message="Deliverables retrieved successfully",
        data=DeliverablesView.model_validate(deliverables).model_dump(by_alias=True),
    )


@router.post("/{job_id}/delivery/link", response_model=ResponseSchema)
async def create_delivery_link(
    job_id: UUID = Path(..., description="Job ID"),
    current_user: User = Depends(require_partner_owner),
    db: AsyncSession = Depends(get_db),
):
    """Return the delivery link, creating it on first use."""
    job = await JobService(db).get_job_for_user(job_id, current_user)
    token = await DeliveryService(db).generate_token(job)

    link = DeliveryLinkResponse(job_id=job.id, token=token, url=settings.delivery_url(token))
    return ResponseSchema(
        status="success",
        message="Delivery link ready",
        data=link.model_dump(by_alias=True),
    )


@router.post("/{job_id}/delivery/send", response_model=ResponseSchema)
async def send_delivery(
    send_data: DeliverySendRequest,
    job_id: UUID = Path(..., description="Job ID"),
    current_user: User = Depends(require_partner_owner),
    db: AsyncSession = Depends(get_db),
):
    """Mark the job delivered and email the delivery link to the customer."""
    job = await JobService(db).get_job_for_user(job_id, current_user)
    service = DeliveryService(db)
    record = await service.send_delivery(
        job,
        current_user,
        recipient_email=str(send_data.recipient_email),
        subject=send_data.subject,
        message=send_data.message,
    )

    return ResponseSchema(
        status="success",
        message="Delivery sent successfully",
        data={
            "jobId": job.id,
            "jobStatus": job.status,
            "url": settings.delivery_url(job.delivery_token),
            "recipientEmail": record.recipient_email,
            "subject": record.subject,
            "sentAt": record.sent_at,
        },
    )


@router.get("/{job_id}/delivery/emails", response_model=ResponseSchema)
async def list_delivery_emails(
    job_id: UUID = Path(..., description="Job ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    job = await JobService(db).get_job_for_user(job_id, current_user)
    records = await DeliveryService(db).list_delivery_emails(job.id)

    return ResponseSchema(
        status="success",
        message="Delivery emails retrieved successfully",
        data=[
            {
                "id": record.id,
                "recipientEmail": record.recipient_email,
                "subject": record.subject,
                "sentAt": record.sent_at,
            }
            for record in records
        ],
    )


# Revisions and review
@router.get("/{job_id}/revisions", response_model=ResponseSchema)
async def list_revision_requests(
    job_id: UUID = Path(..., description="Job ID"),
    order_id: UUID | None = Query(None, alias="orderId"),
    pagination: PaginationParams = Depends(pagination_params),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Revision history of the job, newest first."""
    job = await JobService(db).get_job_for_user(job_id, current_user)
    result = await RevisionService(db).list_revision_requests(
        job.id, pagination, order_id=order_id
    )

    return ResponseSchema(
        status="success",
        message="Revision requests retrieved successfully",
        data=result.serialize(RevisionRequestResponse),
    )


@router.get("/{job_id}/review", response_model=ResponseSchema)
async def get_job_review(
    job_id: UUID = Path(..., description="Job ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    job = await JobService(db).get_job_for_user(job_id, current_user)
    review = await ReviewService(db).get_review(job.id)

    return ResponseSchema(
        status="success",
        message="Review retrieved successfully" if review else "No review submitted yet",
        data=ReviewResponse.model_validate(review).model_dump(by_alias=True) if review else None,
    )
