"""
Unit tests for RevisionService.
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select

from app.domains.revision.service import RevisionService
from app.exceptions.base import NotFoundError, ValidationError
from app.exceptions.delivery import RevisionsExhaustedError
from app.services.notification_service import NotificationService
from app.shared.pagination import PaginationParams
from models import FileComment, Order, RevisionRequest
from tests.conftest import PARTNER_ID, make_file

FEEDBACK = "Please brighten the kitchen shots"


@pytest.fixture
def mock_notify():
    with patch.object(
        NotificationService, "notify_revision_requested", new_callable=AsyncMock
    ) as mocked:
        mocked.return_value = True
        yield mocked


class TestRevisionStatus:
    """Test cases for the revision counters."""

    @pytest.mark.asyncio
    async def test_can_request_revision(self, test_db, test_order):
        service = RevisionService(test_db)

        assert await service.can_request_revision(test_order.id) is True

        test_order.used_revision_rounds = 2
        await test_db.commit()
        assert await service.can_request_revision(test_order.id) is False

    @pytest.mark.asyncio
    async def test_get_order_of_other_job(self, test_db, test_order):
        service = RevisionService(test_db)

        with pytest.raises(NotFoundError):
            await service.get_order(test_order.id, job_id=uuid.uuid4())


class TestRequestRevision:
    """Test cases for request_revision."""

    @pytest.mark.asyncio
    async def test_request_consumes_one_round(
        self, test_db, test_job, test_order, photo_files, mock_notify
    ):
        service = RevisionService(test_db)

        request = await service.request_revision(
            test_job, test_order.id, [photo_files[0].id], FEEDBACK, requested_by="Dana"
        )

        assert request.order_id == test_order.id
        assert request.file_ids == [str(photo_files[0].id)]
        assert request.comments == FEEDBACK
        assert request.requested_by == "Dana"

        order = await service.get_order(test_order.id)
        assert order.used_revision_rounds == 1
        assert order.remaining_revision_rounds == 1
        assert order.status == "in_revision"
        mock_notify.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rounds_run_out(self, test_db, test_job, test_order, photo_files, mock_notify):
        service = RevisionService(test_db)
        file_ids = [photo_files[0].id]

        for _ in range(test_order.max_revision_rounds):
            await service.request_revision(test_job, test_order.id, file_ids, FEEDBACK)

        with pytest.raises(RevisionsExhaustedError) as exc_info:
            await service.request_revision(test_job, test_order.id, file_ids, FEEDBACK)

        assert exc_info.value.status_code == 409
        assert exc_info.value.details["remaining_rounds"] == 0

        order = await service.get_order(test_order.id)
        assert order.used_revision_rounds == order.max_revision_rounds
        requests = await test_db.execute(select(RevisionRequest))
        assert len(requests.scalars().all()) == 2
        assert mock_notify.await_count == 2

    @pytest.mark.asyncio
    async def test_zero_rounds_never_allowed(
        self, test_db, test_job, test_order, photo_files, mock_notify
    ):
        test_order.max_revision_rounds = 0
        await test_db.commit()
        service = RevisionService(test_db)

        with pytest.raises(RevisionsExhaustedError):
            await service.request_revision(test_job, test_order.id, [photo_files[0].id], FEEDBACK)
        mock_notify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_open_comment_added_per_file(
        self, test_db, test_job, test_order, photo_files, mock_notify
    ):
        service = RevisionService(test_db)
        file_ids = [photo_files[0].id, photo_files[3].id, photo_files[0].id]

        await service.request_revision(test_job, test_order.id, file_ids, FEEDBACK)

        result = await test_db.execute(select(FileComment))
        comments = result.scalars().all()
        assert {c.file_id for c in comments} == {photo_files[0].id, photo_files[3].id}
        assert all(c.status == "open" for c in comments)
        assert all(c.author_role == "client" for c in comments)
        assert all(c.message == FEEDBACK for c in comments)

    @pytest.mark.asyncio
    async def test_no_files_rejected(self, test_db, test_job, test_order, mock_notify):
        service = RevisionService(test_db)

        with pytest.raises(ValidationError, match="at least one file"):
            await service.request_revision(test_job, test_order.id, [], FEEDBACK)

    @pytest.mark.asyncio
    async def test_short_feedback_rejected(self, test_db, test_job, test_order, photo_files):
        service = RevisionService(test_db)

        with pytest.raises(ValidationError, match="at least"):
            await service.request_revision(test_job, test_order.id, [photo_files[0].id], " fix ")

        order = await service.get_order(test_order.id)
        assert order.used_revision_rounds == 0

    @pytest.mark.asyncio
    async def test_files_outside_order_rejected(
        self, test_db, test_job, test_order, photo_files, mock_notify
    ):
        other_order = Order(
            partner_id=PARTNER_ID,
            order_number="ORD-0002",
            job_id=test_job.id,
            status="completed",
        )
        test_db.add(other_order)
        await test_db.flush()
        stray = make_file(test_job, other_order, "Photos", 20)
        test_db.add(stray)
        await test_db.commit()
        service = RevisionService(test_db)

        with pytest.raises(ValidationError) as exc_info:
            await service.request_revision(
                test_job, test_order.id, [photo_files[0].id, stray.id], FEEDBACK
            )

        assert exc_info.value.details["file_ids"] == [str(stray.id)]
        order = await service.get_order(test_order.id)
        assert order.used_revision_rounds == 0

    @pytest.mark.asyncio
    async def test_notification_failure_does_not_fail_request(
        self, test_db, test_job, test_order, photo_files, partner_user
    ):
        service = RevisionService(test_db)

        with patch(
            "app.services.notification_service.notify_revision_requested_task.delay",
            side_effect=ConnectionError("broker down"),
        ):
            request = await service.request_revision(
                test_job, test_order.id, [photo_files[0].id], FEEDBACK
            )

        assert request.id is not None


class TestConfigureAndHistory:
    """Test cases for configure_max_rounds and the revision history."""

    @pytest.mark.asyncio
    async def test_configure_max_rounds(self, test_db, test_order):
        service = RevisionService(test_db)

        order = await service.configure_max_rounds(test_order, 5)

        assert order.max_revision_rounds == 5
        assert order.remaining_revision_rounds == 5

    @pytest.mark.asyncio
    async def test_lowering_below_used_leaves_zero(self, test_db, test_order):
        test_order.used_revision_rounds = 2
        await test_db.commit()
        service = RevisionService(test_db)

        order = await service.configure_max_rounds(test_order, 1)

        assert order.used_revision_rounds == 2
        assert order.remaining_revision_rounds == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [-1, True, 2.5, "3"])
    async def test_configure_rejects_invalid_values(self, test_db, test_order, value):
        service = RevisionService(test_db)

        with pytest.raises(ValidationError):
            await service.configure_max_rounds(test_order, value)

    @pytest.mark.asyncio
    async def test_history_is_paginated(
        self, test_db, test_job, test_order, photo_files, mock_notify
    ):
        service = RevisionService(test_db)
        await service.request_revision(test_job, test_order.id, [photo_files[0].id], FEEDBACK)
        await service.request_revision(test_job, test_order.id, [photo_files[1].id], FEEDBACK)

        page = await service.list_revision_requests(test_job.id, PaginationParams(page=1, size=1))

        assert page.total == 2
        assert page.total_pages == 2
        assert page.has_next is True
        assert len(page.items) == 1

    @pytest.mark.asyncio
    async def test_list_revision_status(self, test_db, test_job, test_order):
        service = RevisionService(test_db)

        statuses = await service.list_revision_status(test_job.id)

        assert [s["order_id"] for s in statuses] == [test_order.id]
