"""Public delivery endpoints.

There is no login here: the delivery token in the URL is the capability.
Any miss behind a token answers with the same 404.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.domains.comment.service import CommentService
from app.domains.delivery.service import DeliveryService
from app.domains.review.service import ReviewService
from app.domains.revision.service import RevisionService
from app.schemas.comment import FileCommentCreate, FileCommentResponse
from app.schemas.delivery import DeliveryPayload
from app.schemas.review import ReviewResponse, ReviewSubmit
from app.schemas.revision import RevisionRequestCreate, RevisionRequestResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/delivery", tags=["delivery"])


@router.get("/{token}", response_model=DeliveryPayload)
async def get_delivery(
    token: str = Path(..., description="Delivery token"),
    db: AsyncSession = Depends(get_db),
):
    """Everything the client delivery page shows."""
    service = DeliveryService(db)
    job = await service.resolve(token)
    return DeliveryPayload.model_validate(await service.build_payload(job))


@router.post(
    "/{token}/revisions/request",
    response_model=RevisionRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_revision(
    revision_data: RevisionRequestCreate,
    token: str = Path(..., description="Delivery token"),
    db: AsyncSession = Depends(get_db),
):
    """Ask for a revision of some files; consumes one revision round of the order."""
    service = DeliveryService(db)
    job = await service.resolve(token)
    for file_id in revision_data.file_ids:
        await service.get_public_file(job, file_id)

    revision_request = await RevisionService(db).request_revision(
        job,
        revision_data.order_id,
        revision_data.file_ids,
        revision_data.comments,
        requested_by=revision_data.requested_by,
    )
    return RevisionRequestResponse.model_validate(revision_request)


@router.get("/{token}/files/{file_id}/comments", response_model=list[FileCommentResponse])
async def list_comments(
    token: str = Path(..., description="Delivery token"),
    file_id: UUID = Path(..., description="File ID"),
    db: AsyncSession = Depends(get_db),
):
    service = DeliveryService(db)
    job = await service.resolve(token)
    file = await service.get_public_file(job, file_id)
    comments = await CommentService(db).list_comments(file.id)
    return [FileCommentResponse.model_validate(comment) for comment in comments]


@router.post(
    "/{token}/files/{file_id}/comments",
    response_model=FileCommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    comment_data: FileCommentCreate,
    token: str = Path(..., description="Delivery token"),
    file_id: UUID = Path(..., description="File ID"),
    db: AsyncSession = Depends(get_db),
):
    """Append a comment to the thread of a delivered file."""
    service = DeliveryService(db)
    job = await service.resolve(token)
    file = await service.get_public_file(job, file_id)

    comment = await CommentService(db).add_comment(
        file,
        author_id=comment_data.author_id,
        author_name=comment_data.author_name,
        author_role=comment_data.author_role,
        message=comment_data.message,
        status=comment_data.status,
    )
    return FileCommentResponse.model_validate(comment)


@router.post("/{token}/review", response_model=ReviewResponse)
async def submit_review(
    review_data: ReviewSubmit,
    response: Response,
    token: str = Path(..., description="Delivery token"),
    db: AsyncSession = Depends(get_db),
):
    """Rate the job. A second submission replaces the first (201 created, 200 updated)."""
    job = await DeliveryService(db).resolve(token)
    review, created = await ReviewService(db).submit_review(
        job.id,
        review_data.rating,
        review=review_data.review,
        submitted_by=review_data.submitted_by,
        submitted_by_email=review_data.submitted_by_email,
    )

    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return ReviewResponse.model_validate(review)
