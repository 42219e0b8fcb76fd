"""
Unit tests for CommentService.
"""

import uuid

import pytest

from app.domains.comment.service import CommentService
from app.exceptions.base import NotFoundError, ValidationError


class TestAddComment:
    """Test cases for adding comments to a file thread."""

    @pytest.mark.asyncio
    async def test_add_comment(self, test_db, photo_files):
        service = CommentService(test_db)
        file = photo_files[0]

        comment = await service.add_comment(
            file, "firebase_uid_1", "Sam Editor", "editor", "  Re-exported with more contrast  "
        )

        assert comment.id is not None
        assert comment.file_id == file.id
        assert comment.job_id == file.job_id
        assert comment.order_id == file.order_id
        assert comment.message == "Re-exported with more contrast"
        assert comment.author_role == "editor"
        assert comment.status is None

    @pytest.mark.asyncio
    async def test_add_comment_with_status(self, test_db, photo_files):
        service = CommentService(test_db)

        comment = await service.add_comment(
            photo_files[0], "client", "Client", "client", "Sky looks grey", status="open"
        )

        assert comment.status == "open"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["", "   ", None])
    async def test_empty_message_rejected(self, test_db, photo_files, message):
        service = CommentService(test_db)

        with pytest.raises(ValidationError, match="empty"):
            await service.add_comment(photo_files[0], "client", "Client", "client", message)

    @pytest.mark.asyncio
    async def test_overlong_message_rejected(self, test_db, photo_files):
        service = CommentService(test_db)

        with pytest.raises(ValidationError, match="exceed"):
            await service.add_comment(photo_files[0], "client", "Client", "client", "x" * 5001)

    @pytest.mark.asyncio
    async def test_unknown_role_rejected(self, test_db, photo_files):
        service = CommentService(test_db)

        with pytest.raises(ValidationError):
            await service.add_comment(photo_files[0], "u1", "Someone", "stranger", "Hello")

    @pytest.mark.asyncio
    async def test_missing_author_rejected(self, test_db, photo_files):
        service = CommentService(test_db)

        with pytest.raises(ValidationError, match="author"):
            await service.add_comment(photo_files[0], " ", "Client", "client", "Hello")


class TestThread:
    """Test cases for listing threads and comment status."""

    @pytest.mark.asyncio
    async def test_thread_is_oldest_first(self, test_db, photo_files):
        service = CommentService(test_db)
        file = photo_files[0]
        first = await service.add_comment(file, "client", "Client", "client", "First")
        second = await service.add_comment(file, "u1", "Sam", "editor", "Second")
        await service.add_comment(photo_files[1], "client", "Client", "client", "Elsewhere")

        thread = await service.list_comments(file.id)

        assert [c.id for c in thread] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_update_status(self, test_db, test_job, photo_files):
        service = CommentService(test_db)
        comment = await service.add_comment(
            photo_files[0], "client", "Client", "client", "Fix the sky", status="open"
        )

        updated = await service.update_comment_status(test_job.id, comment.id, "resolved")

        assert updated.status == "resolved"
        assert updated.message == "Fix the sky"

    @pytest.mark.asyncio
    async def test_update_status_other_job(self, test_db, photo_files):
        service = CommentService(test_db)
        comment = await service.add_comment(photo_files[0], "client", "Client", "client", "Hi")

        with pytest.raises(NotFoundError):
            await service.update_comment_status(uuid.uuid4(), comment.id, "resolved")

    @pytest.mark.asyncio
    async def test_update_status_invalid_value(self, test_db, test_job, photo_files):
        service = CommentService(test_db)
        comment = await service.add_comment(photo_files[0], "client", "Client", "client", "Hi")

        with pytest.raises(ValidationError):
            await service.update_comment_status(test_job.id, comment.id, "closed")

    @pytest.mark.asyncio
    async def test_files_with_open_comments(self, test_db, test_job, photo_files):
        service = CommentService(test_db)
        await service.add_comment(photo_files[0], "c", "Client", "client", "Open", status="open")
        await service.add_comment(
            photo_files[1], "u", "Sam", "editor", "Working", status="in_progress"
        )
        await service.add_comment(photo_files[2], "c", "Client", "client", "Done", status="resolved")
        await service.add_comment(photo_files[3], "c", "Client", "client", "Just a note")

        open_ids = await service.files_with_open_comments(test_job.id)

        assert open_ids == {photo_files[0].id, photo_files[1].id}
