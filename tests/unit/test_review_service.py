"""
Unit tests for ReviewService.
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from app.domains.review.service import ReviewService
from app.exceptions.base import ValidationError
from models import JobReview


def _missing_once(get_review):
    """Stand-in for ``get_review`` that misses the row on its first call only."""
    calls = []

    async def lookup(job_id):
        calls.append(job_id)
        if len(calls) == 1:
            return None
        return await get_review(job_id)

    return lookup


class TestSubmitReview:
    """Test cases for submit_review."""

    @pytest.mark.asyncio
    async def test_first_submission_creates(self, test_db, test_job):
        service = ReviewService(test_db)

        record, created = await service.submit_review(
            test_job.id, 4, "  Lovely photos  ", submitted_by="Dana", submitted_by_email="d@x.com"
        )

        assert created is True
        assert record.rating == 4
        assert record.review == "Lovely photos"
        assert record.submitted_by == "Dana"
        assert record.submitted_at is not None

    @pytest.mark.asyncio
    async def test_resubmission_updates_single_record(self, test_db, test_job):
        service = ReviewService(test_db)
        first, _ = await service.submit_review(test_job.id, 3, "Good")

        second, created = await service.submit_review(test_job.id, 5, "Great after edits")

        assert created is False
        assert second.id == first.id
        assert second.rating == 5
        assert second.review == "Great after edits"
        count = await test_db.execute(select(func.count(JobReview.id)))
        assert count.scalar() == 1

    @pytest.mark.asyncio
    async def test_concurrent_first_submission_becomes_update(self, test_db, test_job):
        service = ReviewService(test_db)
        await service.submit_review(test_job.id, 4, "ok")

        with patch.object(service, "get_review", side_effect=_missing_once(service.get_review)):
            record, created = await service.submit_review(test_job.id, 5, "better")

        assert created is False
        assert record.rating == 5
        count = await test_db.execute(
            select(func.count(JobReview.id)).where(JobReview.job_id == test_job.id)
        )
        assert count.scalar() == 1

    @pytest.mark.asyncio
    async def test_failed_update_after_conflict_is_rolled_back(self, test_db, test_job):
        service = ReviewService(test_db)
        await service.submit_review(test_job.id, 4, "ok")

        failures = [
            IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")),
            OperationalError("UPDATE", {}, Exception("database is locked")),
        ]
        with patch.object(service, "get_review", side_effect=_missing_once(service.get_review)):
            with patch.object(test_db, "commit", new_callable=AsyncMock, side_effect=failures):
                with pytest.raises(ValidationError, match="Failed to save review"):
                    await service.submit_review(test_job.id, 5, "better")

        stored = await service.get_review(test_job.id)
        assert stored.rating == 4
        assert stored.review == "ok"

    @pytest.mark.asyncio
    async def test_blank_text_stored_as_none(self, test_db, test_job):
        service = ReviewService(test_db)

        record, _ = await service.submit_review(test_job.id, 5, "   ")

        assert record.review is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6, -1, 4.5, "5", True, None])
    async def test_invalid_rating_rejected(self, test_db, test_job, rating):
        service = ReviewService(test_db)

        with pytest.raises(ValidationError):
            await service.submit_review(test_job.id, rating)

        assert await service.get_review(test_job.id) is None

    @pytest.mark.asyncio
    async def test_overlong_review_rejected(self, test_db, test_job):
        service = ReviewService(test_db)

        with pytest.raises(ValidationError, match="exceed"):
            await service.submit_review(test_job.id, 5, "x" * 2001)

    @pytest.mark.asyncio
    async def test_get_review_missing(self, test_db, test_job):
        service = ReviewService(test_db)

        assert await service.get_review(test_job.id) is None
