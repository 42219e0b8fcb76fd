"""File comment threads.

Threads are append-only: comments are never edited or deleted, only their
``status`` moves between open, in_progress and resolved.
"""

import logging
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.exceptions.base import NotFoundError, ValidationError
from models import CommentAuthorRole, CommentStatus, DeliverableFile, FileComment

logger = logging.getLogger(__name__)

UNRESOLVED_STATUSES = (CommentStatus.open.value, CommentStatus.in_progress.value)


class CommentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_comment(
        self,
        file: DeliverableFile,
        author_id: str,
        author_name: str,
        author_role: CommentAuthorRole | str,
        message: str,
        status: CommentStatus | str | None = None,
    ) -> FileComment:
        """Append a comment to the thread of ``file``.

        Raises:
            ValidationError: If the message is empty or too long, or the
                role or status is unknown.
        """
        comment = self.build_comment(file, author_id, author_name, author_role, message, status)

        try:
            self.db.add(comment)
            await self.db.commit()
            await self.db.refresh(comment)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to add comment: {str(e)}") from e

        logger.info("Comment added to file %s by %s (%s)", file.id, author_id, comment.author_role)
        return comment

    def build_comment(
        self,
        file: DeliverableFile,
        author_id: str,
        author_name: str,
        author_role: CommentAuthorRole | str,
        message: str,
        status: CommentStatus | str | None = None,
    ) -> FileComment:
        """Validate and build a comment without adding it to the session."""
        message = (message or "").strip()
        if not message:
            raise ValidationError("Comment message cannot be empty")
        if len(message) > settings.max_comment_length:
            raise ValidationError(
                f"Comment message cannot exceed {settings.max_comment_length} characters"
            )
        if not (author_id or "").strip() or not (author_name or "").strip():
            raise ValidationError("Comment author is required")

        try:
            role = CommentAuthorRole(author_role).value
            status_value = CommentStatus(status).value if status is not None else None
        except ValueError as e:
            raise ValidationError(str(e)) from e

        return FileComment(
            file_id=file.id,
            job_id=file.job_id,
            order_id=file.order_id,
            author_id=author_id.strip(),
            author_name=author_name.strip(),
            author_role=role,
            message=message,
            status=status_value,
        )

    async def list_comments(self, file_id: UUID) -> list[FileComment]:
        """Comments of a file, oldest first."""
        stmt = (
            select(FileComment)
            .where(FileComment.file_id == file_id)
            .order_by(FileComment.created_at, FileComment.id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def update_comment_status(
        self, job_id: UUID, comment_id: UUID, status: CommentStatus | str
    ) -> FileComment:
        try:
            status_value = CommentStatus(status).value
        except ValueError as e:
            raise ValidationError(str(e)) from e

        stmt = select(FileComment).where(
            and_(FileComment.id == comment_id, FileComment.job_id == job_id)
        )
        result = await self.db.execute(stmt)
        comment = result.scalar_one_or_none()
        if comment is None:
            raise NotFoundError("Comment not found")

        comment.status = status_value
        try:
            await self.db.commit()
            await self.db.refresh(comment)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to update comment: {str(e)}") from e

        logger.info("Comment %s on file %s is now %s", comment.id, comment.file_id, status_value)
        return comment

    async def files_with_open_comments(self, job_id: UUID) -> set[UUID]:
        """Ids of files in the job carrying at least one unresolved comment."""
        stmt = (
            select(FileComment.file_id)
            .where(
                and_(
                    FileComment.job_id == job_id,
                    FileComment.status.in_(UNRESOLVED_STATUSES),
                )
            )
            .distinct()
        )
        result = await self.db.execute(stmt)
        return set(result.scalars().all())
