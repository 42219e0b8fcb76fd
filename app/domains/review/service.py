"""Client review of a job: one record per job, updated on resubmission."""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.exceptions.base import ValidationError
from models import JobReview

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class ReviewService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_review(self, job_id: UUID) -> JobReview | None:
        result = await self.db.execute(select(JobReview).where(JobReview.job_id == job_id))
        return result.scalar_one_or_none()

    async def submit_review(
        self,
        job_id: UUID,
        rating: int,
        review: str | None = None,
        submitted_by: str | None = None,
        submitted_by_email: str | None = None,
    ) -> tuple[JobReview, bool]:
        """Create or overwrite the review of ``job_id``.

        Returns:
            The review and whether it was created by this call.

        Raises:
            ValidationError: If the rating is not an integer from 1 to 5 or
                the text is too long.
        """
        if isinstance(rating, bool) or not isinstance(rating, int):
            raise ValidationError("Rating must be an integer", details={"rating": rating})
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError(
                f"Rating must be between {MIN_RATING} and {MAX_RATING}",
                details={"rating": rating},
            )

        text = review.strip() if review and review.strip() else None
        if text is not None and len(text) > settings.max_review_length:
            raise ValidationError(
                f"Review cannot exceed {settings.max_review_length} characters"
            )

        existing = await self.get_review(job_id)
        if existing is not None:
            record = self._apply(existing, rating, text, submitted_by, submitted_by_email)
            created = False
        else:
            record = self._apply(JobReview(job_id=job_id), rating, text, submitted_by, submitted_by_email)
            self.db.add(record)
            created = True

        try:
            await self.db.commit()
        except IntegrityError:
            # A concurrent submission created the row first; update it instead
            await self.db.rollback()
            record = await self._overwrite_existing(
                job_id, rating, text, submitted_by, submitted_by_email
            )
            created = False
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to save review: {str(e)}") from e

        await self.db.refresh(record)
        logger.info(
            "Review %s for job %s (rating %d)", "created" if created else "updated", job_id, rating
        )
        return record, created

    async def _overwrite_existing(
        self,
        job_id: UUID,
        rating: int,
        review: str | None,
        submitted_by: str | None,
        submitted_by_email: str | None,
    ) -> JobReview:
        try:
            existing = await self.get_review(job_id)
            if existing is None:
                raise ValidationError("Failed to save review: conflicting submission vanished")
            record = self._apply(existing, rating, review, submitted_by, submitted_by_email)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to save review: {str(e)}") from e
        return record

    @staticmethod
    def _apply(
        record: JobReview,
        rating: int,
        review: str | None,
        submitted_by: str | None,
        submitted_by_email: str | None,
    ) -> JobReview:
        record.rating = rating
        record.review = review
        record.submitted_by = submitted_by
        record.submitted_by_email = submitted_by_email
        record.submitted_at = datetime.utcnow()
        return record
