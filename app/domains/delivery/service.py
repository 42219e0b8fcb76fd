"""Delivery access: the token-scoped public view of a job.

The delivery token is an opaque random string that never encodes the job
id. It is created lazily, once, and then reused so links already shared
with the customer keep working.
"""

import logging
import secrets
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import and_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.domains.comment.service import CommentService
from app.domains.delivery import index
from app.domains.folder.service import FolderService
from app.domains.job.service import JobService
from app.domains.review.service import ReviewService
from app.domains.settings.service import SettingsService
from app.exceptions.base import ValidationError
from app.exceptions.delivery import DeliveryLinkNotFoundError
from app.schemas.review import ReviewResponse
from app.services.notification_service import NotificationService
from models import DeliverableFile, DeliveryEmail, Job, JobStatus, User

logger = logging.getLogger(__name__)

MAX_TOKEN_LENGTH = 128


class DeliveryService:
    """Service class for delivery links and the public delivery payload."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def resolve(self, token: str) -> Job:
        """Return the job behind ``token``.

        Raises:
            DeliveryLinkNotFoundError: For empty, malformed or unknown tokens.
        """
        if not token or len(token) > MAX_TOKEN_LENGTH:
            raise DeliveryLinkNotFoundError()

        stmt = select(Job).options(selectinload(Job.customer)).where(Job.delivery_token == token)
        result = await self.db.execute(stmt)
        job = result.scalar_one_or_none()
        if job is None:
            raise DeliveryLinkNotFoundError()
        return job

    async def generate_token(self, job: Job) -> str:
        """Return the delivery token of ``job``, creating it on first use.

        The token is only written while the column is still empty, so
        concurrent callers converge on the same value.
        """
        if job.delivery_token:
            return job.delivery_token

        candidate = secrets.token_urlsafe(settings.delivery_token_bytes)
        try:
            await self.db.execute(
                update(Job)
                .where(and_(Job.id == job.id, Job.delivery_token.is_(None)))
                .values(delivery_token=candidate)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to create delivery link: {str(e)}") from e

        await self.db.refresh(job, attribute_names=["delivery_token"])
        if job.delivery_token == candidate:
            logger.info("Created delivery link for job %s", job.job_number)
        return job.delivery_token

    async def send_delivery(
        self,
        job: Job,
        user: User,
        recipient_email: str,
        subject: str | None = None,
        message: str | None = None,
    ) -> DeliveryEmail:
        """Create the link if needed, mark the job delivered and email the customer.

        The email itself is queued; a failure to queue it does not undo the
        delivery.
        """
        token = await self.generate_token(job)
        subject = subject or f"Your photos for {job.address} are ready"

        job.status = JobStatus.delivered.value
        record = DeliveryEmail(
            job_id=job.id,
            recipient_email=recipient_email,
            subject=subject,
            sent_by=user.id,
            sent_at=datetime.utcnow(),
        )
        try:
            self.db.add(record)
            await self.db.commit()
            await self.db.refresh(record)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to record delivery: {str(e)}") from e

        logger.info("Job %s delivered to %s", job.job_number, recipient_email)

        branding = await SettingsService(self.db).find_partner_settings(job.partner_id)
        await NotificationService(self.db).notify_delivery_sent(
            job,
            recipient_email=recipient_email,
            delivery_url=settings.delivery_url(token),
            subject=subject,
            message=message,
            business_name=branding.business_name if branding else None,
        )
        return record

    async def list_delivery_emails(self, job_id: UUID) -> list[DeliveryEmail]:
        stmt = (
            select(DeliveryEmail)
            .where(DeliveryEmail.job_id == job_id)
            .order_by(DeliveryEmail.sent_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def build_payload(self, job: Job) -> dict[str, Any]:
        """Everything the public delivery page renders for ``job``."""
        job_service = JobService(self.db)
        folders = await FolderService(self.db).list_folders(job.id)
        files = await job_service.list_files(job.id)
        orders = await job_service.list_orders(job.id)
        open_file_ids = await CommentService(self.db).files_with_open_comments(job.id)
        review = await ReviewService(self.db).get_review(job.id)
        branding = await SettingsService(self.db).find_partner_settings(job.partner_id)

        options = {
            "public": True,
            "hidden_prefix": settings.hidden_file_prefix,
            "open_file_ids": open_file_ids,
        }
        customer = None
        if job.customer is not None:
            customer = {
                "first_name": job.customer.first_name,
                "last_name": job.customer.last_name,
                "company": job.customer.company,
            }

        return {
            "job": {
                "job_id": job.job_number,
                "address": job.address,
                "status": job.status,
                "customer": customer,
            },
            "completed_files": index.by_order(orders, folders, files, **options),
            "folders": index.by_folder(folders, files, **options),
            "revision_status": [index.revision_status(order) for order in orders],
            "job_review": ReviewResponse.model_validate(review) if review else None,
            "branding": {
                "business_name": branding.business_name if branding else None,
                "logo_url": branding.logo_url if branding else None,
            },
        }

    async def build_deliverables_view(self, job: Job, view: str = "folder") -> dict[str, Any]:
        """Internal dashboard projection, not filtered by folder visibility."""
        if view not in ("folder", "order"):
            raise ValidationError("View must be 'folder' or 'order'", details={"view": view})

        job_service = JobService(self.db)
        folders = await FolderService(self.db).list_folders(job.id)
        files = await job_service.list_files(job.id)
        open_file_ids = await CommentService(self.db).files_with_open_comments(job.id)
        options = {
            "public": False,
            "hidden_prefix": settings.hidden_file_prefix,
            "open_file_ids": open_file_ids,
        }

        if view == "folder":
            groups = index.by_folder(folders, files, **options)
            return {"view": view, "folders": groups, "total_files": index.count_files(groups)}

        orders = await job_service.list_orders(job.id)
        groups = index.by_order(orders, folders, files, **options)
        return {"view": view, "orders": groups, "total_files": index.count_files(groups)}

    async def get_public_file(self, job: Job, file_id: UUID) -> DeliverableFile:
        """A file of ``job`` that the customer is allowed to see.

        Files of other jobs, files not ready for delivery and files under a
        hidden folder all raise the same :class:`DeliveryLinkNotFoundError`.
        """
        stmt = select(DeliverableFile).where(
            and_(DeliverableFile.id == file_id, DeliverableFile.job_id == job.id)
        )
        result = await self.db.execute(stmt)
        file = result.scalar_one_or_none()
        if file is None or not index.is_deliverable(file, settings.hidden_file_prefix):
            raise DeliveryLinkNotFoundError()

        if file.folder_path is not None:
            folders = await FolderService(self.db).list_folders(job.id)
            own = {folder.path: bool(folder.is_visible) for folder in folders}
            if not index.is_path_visible(file.folder_path, own):
                raise DeliveryLinkNotFoundError()
        return file
