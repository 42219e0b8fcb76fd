"""Revision ledger: bounded revision rounds per order.

``remaining = max(0, max_revision_rounds - used_revision_rounds)``. A round
is consumed by one conditional ``UPDATE ... WHERE used < max`` executed in
the same transaction that records the request, so concurrent requests for
the last round cannot both succeed and a round is never consumed without
its request row (or the other way round).
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import and_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.domains.comment.service import CommentService
from app.domains.delivery import index
from app.exceptions.base import NotFoundError, ValidationError
from app.exceptions.delivery import RevisionsExhaustedError
from app.services.notification_service import NotificationService
from app.shared.pagination import Page, PaginationParams, paginate
from models import (
    CommentAuthorRole,
    CommentStatus,
    DeliverableFile,
    Job,
    Order,
    OrderStatus,
    RevisionRequest,
)

logger = logging.getLogger(__name__)

CLIENT_AUTHOR_ID = "client"
CLIENT_AUTHOR_NAME = "Client"


class RevisionService:
    """Service class for the revision rounds of orders."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_order(self, order_id: UUID, job_id: UUID | None = None) -> Order:
        stmt = select(Order).where(Order.id == order_id)
        if job_id is not None:
            stmt = stmt.where(Order.job_id == job_id)
        result = await self.db.execute(stmt)
        order = result.scalar_one_or_none()
        if order is None:
            raise NotFoundError("Order not found", details={"order_id": str(order_id)})
        return order

    async def can_request_revision(self, order_id: UUID) -> bool:
        order = await self.get_order(order_id)
        return order.remaining_revision_rounds > 0

    async def request_revision(
        self,
        job: Job,
        order_id: UUID,
        file_ids: list[UUID],
        comments: str,
        requested_by: str | None = None,
    ) -> RevisionRequest:
        """Consume one revision round of the order and record the request.

        Every selected file also gets an open client comment carrying the
        feedback so the thread shows it as unresolved.

        Raises:
            ValidationError: No files, files outside the order, or feedback
                shorter than the configured minimum.
            NotFoundError: The order does not belong to ``job``.
            RevisionsExhaustedError: No rounds remain.
        """
        comments = (comments or "").strip()
        unique_ids = list(dict.fromkeys(file_ids or []))
        if not unique_ids:
            raise ValidationError("Select at least one file for the revision")
        if len(comments) < settings.min_revision_comment_length:
            raise ValidationError(
                f"Revision feedback must be at least "
                f"{settings.min_revision_comment_length} characters",
                details={"min_length": settings.min_revision_comment_length},
            )

        order = await self.get_order(order_id, job_id=job.id)
        files = await self._get_order_files(order, unique_ids)

        if order.remaining_revision_rounds <= 0:
            raise RevisionsExhaustedError(details=index.revision_status(order))

        try:
            consumed = await self.db.execute(
                update(Order)
                .where(
                    and_(
                        Order.id == order.id,
                        Order.used_revision_rounds < Order.max_revision_rounds,
                    )
                )
                .values(
                    used_revision_rounds=Order.used_revision_rounds + 1,
                    status=OrderStatus.in_revision.value,
                )
                .execution_options(synchronize_session=False)
            )
            if consumed.rowcount == 0:
                await self.db.rollback()
                await self.db.refresh(order)
                raise RevisionsExhaustedError(details=index.revision_status(order))

            revision_request = RevisionRequest(
                order_id=order.id,
                job_id=job.id,
                file_ids=[str(file_id) for file_id in unique_ids],
                comments=comments,
                requested_by=requested_by,
            )
            self.db.add(revision_request)

            comment_service = CommentService(self.db)
            for file in files:
                self.db.add(
                    comment_service.build_comment(
                        file,
                        author_id=CLIENT_AUTHOR_ID,
                        author_name=requested_by or CLIENT_AUTHOR_NAME,
                        author_role=CommentAuthorRole.client,
                        message=comments,
                        status=CommentStatus.open,
                    )
                )

            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to record revision request: {str(e)}") from e

        await self.db.refresh(order)
        await self.db.refresh(revision_request)
        logger.info(
            "Revision round %d/%d consumed on order %s (%d files)",
            order.used_revision_rounds,
            order.max_revision_rounds,
            order.order_number,
            len(unique_ids),
        )

        await NotificationService(self.db).notify_revision_requested(job, order, revision_request)
        return revision_request

    async def configure_max_rounds(self, order: Order, max_rounds: int) -> Order:
        """Set the revision allowance. Consumed rounds are never given back."""
        if isinstance(max_rounds, bool) or not isinstance(max_rounds, int) or max_rounds < 0:
            raise ValidationError("Maximum revision rounds must be a non-negative integer")

        order.max_revision_rounds = max_rounds
        try:
            await self.db.commit()
            await self.db.refresh(order)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to update revision rounds: {str(e)}") from e

        logger.info("Order %s now allows %d revision rounds", order.order_number, max_rounds)
        return order

    async def list_revision_status(self, job_id: UUID) -> list[dict[str, Any]]:
        stmt = (
            select(Order)
            .where(Order.job_id == job_id)
            .order_by(Order.created_at, Order.order_number)
        )
        result = await self.db.execute(stmt)
        return [index.revision_status(order) for order in result.scalars().all()]

    async def list_revision_requests(
        self,
        job_id: UUID,
        pagination: PaginationParams,
        order_id: UUID | None = None,
    ) -> Page:
        """Revision history of a job, newest first."""
        query = select(RevisionRequest).where(RevisionRequest.job_id == job_id)
        if order_id is not None:
            query = query.where(RevisionRequest.order_id == order_id)
        query = query.order_by(RevisionRequest.created_at.desc(), RevisionRequest.id)
        return await paginate(self.db, query, pagination)

    async def _get_order_files(self, order: Order, file_ids: list[UUID]) -> list[DeliverableFile]:
        stmt = select(DeliverableFile).where(
            and_(DeliverableFile.order_id == order.id, DeliverableFile.id.in_(file_ids))
        )
        result = await self.db.execute(stmt)
        files = list(result.scalars().all())

        found = {file.id for file in files}
        missing = [str(file_id) for file_id in file_ids if file_id not in found]
        if missing:
            raise ValidationError(
                "Some files do not belong to this order", details={"file_ids": missing}
            )
        return files
