"""Celery tasks for delivery notifications.

Tasks receive plain JSON arguments prepared by
:class:`app.services.notification_service.NotificationService`, so workers
never need a database session.
"""

import logging
from typing import Any

from app.celery_app import celery_app
from app.services.email_service import email_service

logger = logging.getLogger(__name__)


@celery_app.task(name="app.tasks.notification_tasks.send_delivery_email_task", bind=True)
def send_delivery_email_task(
    self,
    to_email: str,
    job_number: str,
    address: str,
    delivery_url: str,
    subject: str | None = None,
    message: str | None = None,
    business_name: str | None = None,
) -> dict[str, Any]:
    """Send the delivery link of a job to its customer."""
    logger.info("Sending delivery email for job %s (Task ID: %s)", job_number, self.request.id)

    try:
        success = email_service.send_delivery_email(
            to_email=to_email,
            job_number=job_number,
            address=address,
            delivery_url=delivery_url,
            subject=subject,
            message=message,
            business_name=business_name,
        )
    except Exception as e:
        logger.error("Delivery email task failed: %s", str(e))
        raise self.retry(exc=e, countdown=60, max_retries=3)

    if not success:
        logger.error("Delivery email for job %s was not sent", job_number)
    return {"success": success, "email": to_email}


@celery_app.task(name="app.tasks.notification_tasks.notify_revision_requested_task", bind=True)
def notify_revision_requested_task(
    self,
    recipients: list[str],
    job_number: str,
    address: str,
    order_number: str,
    file_count: int,
    comments: str,
    remaining_rounds: int,
) -> dict[str, Any]:
    """Email the partner team about a new revision request."""
    logger.info(
        "Notifying %d recipient(s) of revision on order %s (Task ID: %s)",
        len(recipients),
        order_number,
        self.request.id,
    )

    sent = 0
    try:
        for recipient in recipients:
            if email_service.send_revision_requested_email(
                to_email=recipient,
                job_number=job_number,
                address=address,
                order_number=order_number,
                file_count=file_count,
                comments=comments,
                remaining_rounds=remaining_rounds,
            ):
                sent += 1
    except Exception as e:
        logger.error("Revision notification task failed: %s", str(e))
        raise self.retry(exc=e, countdown=60, max_retries=3)

    return {"sent": sent, "failed": len(recipients) - sent}
