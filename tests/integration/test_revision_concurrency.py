"""
Integration tests for concurrent revision requests.

Each request runs in its own session, the way two browser tabs hitting the
public page would, against an order with a single round left.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from app.domains.revision.service import RevisionService
from app.exceptions.delivery import RevisionsExhaustedError
from app.services.notification_service import NotificationService
from models import FileComment, Job, Order, RevisionRequest

FEEDBACK = "Please brighten the kitchen shots"


@pytest.fixture(autouse=True)
def mock_notify():
    with patch.object(
        NotificationService, "notify_revision_requested", new_callable=AsyncMock
    ) as mocked:
        yield mocked


@pytest_asyncio.fixture
async def last_round(test_db, test_job, test_order, photo_files):
    """``test_order`` with one round left; the fixture session holds no transaction."""
    test_order.max_revision_rounds = 2
    test_order.used_revision_rounds = 1
    await test_db.commit()
    return test_job.id, test_order.id, [f.id for f in photo_files]


async def _request(session_factory, job_id, order_id, file_ids):
    async with session_factory() as session:
        job = await session.get(Job, job_id)
        return await RevisionService(session).request_revision(job, order_id, file_ids, FEEDBACK)


async def _counts(session_factory, order_id):
    async with session_factory() as session:
        order = await session.get(Order, order_id)
        requests = await session.execute(
            select(func.count(RevisionRequest.id)).where(RevisionRequest.order_id == order_id)
        )
        comments = await session.execute(select(func.count(FileComment.id)))
        return order.used_revision_rounds, requests.scalar(), comments.scalar()


class TestConcurrentRevisionRequests:
    """Only one of two racing requests may take the last round."""

    @pytest.mark.asyncio
    async def test_exactly_one_request_wins(self, session_factory, last_round, mock_notify):
        job_id, order_id, file_ids = last_round

        results = await asyncio.gather(
            _request(session_factory, job_id, order_id, file_ids[:1]),
            _request(session_factory, job_id, order_id, file_ids[1:2]),
            return_exceptions=True,
        )

        successes = [r for r in results if isinstance(r, RevisionRequest)]
        failures = [r for r in results if isinstance(r, RevisionsExhaustedError)]
        assert len(successes) == 1
        assert len(failures) == 1

        used, requests, comments = await _counts(session_factory, order_id)
        assert used == 2
        assert requests == 1
        assert comments == 1
        mock_notify.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stale_read_is_caught_by_conditional_update(
        self, session_factory, last_round, mock_notify
    ):
        """A session that still sees a free round cannot consume it twice."""
        job_id, order_id, file_ids = last_round

        async with session_factory() as stale:
            job = await stale.get(Job, job_id)
            order = await stale.get(Order, order_id)
            assert order.remaining_revision_rounds == 1
            await stale.commit()

            await _request(session_factory, job_id, order_id, file_ids[:1])

            with pytest.raises(RevisionsExhaustedError) as exc_info:
                await RevisionService(stale).request_revision(
                    job, order_id, file_ids[1:2], FEEDBACK
                )

        assert exc_info.value.details["used_rounds"] == 2
        used, requests, comments = await _counts(session_factory, order_id)
        assert (used, requests, comments) == (2, 1, 1)
