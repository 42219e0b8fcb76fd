"""Notification service for delivery and revision events.

Notifications are fire-and-forget: every failure while preparing or
enqueueing a task is logged and swallowed so the operation that triggered
it still succeeds.
"""

import logging

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.tasks.notification_tasks import (
    notify_revision_requested_task,
    send_delivery_email_task,
)
from models import Job, Order, RevisionRequest, User, UserRole

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for dispatching notification tasks."""

    def __init__(self, db: AsyncSession):
        """Initialize notification service.

        Args:
            db: Async database session
        """
        self.db = db

    async def notify_delivery_sent(
        self,
        job: Job,
        recipient_email: str,
        delivery_url: str,
        subject: str | None = None,
        message: str | None = None,
        business_name: str | None = None,
    ) -> bool:
        """Queue the delivery email. Returns whether the task was queued."""
        try:
            send_delivery_email_task.delay(
                to_email=recipient_email,
                job_number=job.job_number,
                address=job.address,
                delivery_url=delivery_url,
                subject=subject,
                message=message,
                business_name=business_name,
            )
        except Exception as e:
            logger.error("Could not queue delivery email for job %s: %s", job.job_number, str(e))
            return False

        logger.info("Queued delivery email for job %s to %s", job.job_number, recipient_email)
        return True

    async def notify_revision_requested(
        self, job: Job, order: Order, revision_request: RevisionRequest
    ) -> bool:
        """Queue the revision notice for the partner team of ``job``."""
        try:
            recipients = await self._get_partner_recipients(job.partner_id)
            if not recipients:
                logger.warning("No recipients for revision notice of job %s", job.job_number)
                return False

            notify_revision_requested_task.delay(
                recipients=recipients,
                job_number=job.job_number,
                address=job.address,
                order_number=order.order_number,
                file_count=len(revision_request.file_ids),
                comments=revision_request.comments,
                remaining_rounds=order.remaining_revision_rounds,
            )
        except Exception as e:
            logger.error(
                "Could not queue revision notice for order %s: %s", order.order_number, str(e)
            )
            return False

        logger.info("Queued revision notice for order %s", order.order_number)
        return True

    async def _get_partner_recipients(self, partner_id: str) -> list[str]:
        query = select(User.email).where(
            and_(
                User.partner_id == partner_id,
                User.role.in_([UserRole.partner.value, UserRole.admin.value]),
                User.is_active == True,  # noqa: E712
            )
        )
        result = await self.db.execute(query)
        return [email for email in result.scalars().all() if email]
