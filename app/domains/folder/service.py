"""Folder tree service: create, rename, delete, visibility and listings.

Folders are keyed by immutable id with a ``parent_id`` reference and a
materialised ``path``. Direct children are found through ``parent_id``;
descendants at any depth through a prefix match on ``path``.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import and_, delete, func, inspect, or_, select
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.exceptions.base import ValidationError
from app.exceptions.delivery import DuplicateFolderError, FolderNotFoundError
from app.shared import folder_path as fp
from models import DeliverableFile, FileComment, Folder

logger = logging.getLogger(__name__)

DELETE_MAX_ATTEMPTS = 3


def _below(column, path: str):
    """SQL condition: ``column`` holds a path strictly below ``path``.

    ``LIKE`` narrows the scan through the index; the ``substr`` comparison
    keeps the match case-sensitive on SQLite as well.
    """
    prefix = fp.descendant_prefix(path)
    return and_(
        column.startswith(prefix, autoescape=True),
        func.substr(column, 1, len(prefix)) == prefix,
    )


def _in_subtree(column, path: str):
    return or_(column == path, _below(column, path))


class FolderService:
    """Service class for the deliverable folder tree of a job."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_folder(
        self,
        job_id: UUID,
        parent_path: str | None,
        name: str,
        order_id: UUID | None = None,
    ) -> Folder:
        """Create ``name`` under ``parent_path`` (a root folder when ``None``).

        Raises:
            InvalidPathError: If the name or parent path is malformed.
            FolderNotFoundError: If the parent folder does not exist.
            DuplicateFolderError: If a sibling already has the resulting path.
        """
        path = fp.join(parent_path, name)
        parent = None
        if parent_path is not None:
            parent = await self._get_folder(job_id, fp.normalize(parent_path))
            if parent is None:
                raise FolderNotFoundError(
                    "Parent folder not found", details={"parent_path": parent_path}
                )

        if await self._get_folder(job_id, path) is not None:
            raise DuplicateFolderError(details={"folder_path": path})

        folder = await self._add_folder(job_id, path, parent, order_id=order_id)
        if folder is None:
            raise DuplicateFolderError(details={"folder_path": path})

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicateFolderError(details={"folder_path": path}) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to create folder: {str(e)}") from e

        await self.db.refresh(folder)
        logger.info("Created folder %r in job %s", path, job_id)
        return folder

    async def ensure_path(self, job_id: UUID, path: str) -> Folder:
        """Return the folder at ``path``, adding any missing ancestors.

        Missing folders take their segment as editor folder name. Nothing is
        committed; the caller owns the transaction.
        """
        segments = fp.parse(path)
        parent = None
        for index in range(1, len(segments) + 1):
            current_path = fp.SEPARATOR.join(segments[:index])
            folder = await self._get_folder(job_id, current_path)
            if folder is None:
                folder = await self._add_folder(job_id, current_path, parent)
            if folder is None:
                # Added concurrently by another transaction
                folder = await self._get_folder(job_id, current_path)
            parent = folder
        return parent

    async def update_folder(
        self,
        job_id: UUID,
        path: str,
        display_name: str | None = None,
        is_visible: bool | None = None,
    ) -> Folder:
        """Apply a display-name change and/or a visibility toggle in one commit.

        ``path`` and file associations are never touched.
        """
        if display_name is None and is_visible is None:
            raise ValidationError("Nothing to update: provide a display name and/or visibility")
        if display_name is not None and not display_name.strip():
            raise ValidationError("Folder display name cannot be empty")

        folder = await self.get_folder(job_id, path)
        if display_name is not None:
            folder.partner_folder_name = display_name.strip()
        if is_visible is not None:
            folder.is_visible = bool(is_visible)

        try:
            await self.db.commit()
            await self.db.refresh(folder)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to update folder: {str(e)}") from e

        logger.info(
            "Updated folder %r in job %s (name=%r, visible=%s)",
            folder.path,
            job_id,
            folder.display_name,
            folder.is_visible,
        )
        return folder

    async def rename_folder(self, job_id: UUID, path: str, new_display_name: str) -> Folder:
        """Change the display name only; ``path`` and file associations are untouched."""
        if new_display_name is None:
            raise ValidationError("Folder display name cannot be empty")
        return await self.update_folder(job_id, path, display_name=new_display_name)

    async def set_visibility(self, job_id: UUID, path: str, is_visible: bool) -> Folder:
        """Show or hide the folder on the public delivery page."""
        return await self.update_folder(job_id, path, is_visible=bool(is_visible))

    async def delete_folder(self, job_id: UUID, path: str) -> dict[str, Any]:
        """Delete the folder, every descendant folder and all their files.

        This is destructive and irreversible. The whole cascade is one
        transaction; on a transient database error it is rolled back and
        retried from the start.
        """
        normalized = fp.normalize(path)
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(OperationalError),
            stop=stop_after_attempt(DELETE_MAX_ATTEMPTS),
            wait=wait_exponential(multiplier=0.1, max=2),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    result = await self._delete_subtree(job_id, normalized)
        except OperationalError as e:
            raise ValidationError(f"Failed to delete folder: {str(e)}") from e

        logger.info(
            "Deleted folder %r in job %s (%d folders, %d files)",
            normalized,
            job_id,
            result["folders_deleted"],
            result["files_deleted"],
        )
        return result

    async def list_children(self, job_id: UUID, parent_path: str | None = None) -> list[Folder]:
        """Direct children of ``parent_path``, or the root folders when ``None``."""
        stmt = select(Folder).where(Folder.job_id == job_id)
        if parent_path is None:
            stmt = stmt.where(Folder.parent_id.is_(None))
        else:
            parent = await self.get_folder(job_id, parent_path)
            stmt = stmt.where(Folder.parent_id == parent.id)

        result = await self.db.execute(stmt.order_by(Folder.display_order, Folder.path))
        return list(result.scalars().all())

    async def list_descendants(self, job_id: UUID, ancestor_path: str) -> list[Folder]:
        """All folders below ``ancestor_path`` at any depth, ordered by path."""
        ancestor = await self.get_folder(job_id, ancestor_path)
        stmt = (
            select(Folder)
            .where(
                and_(
                    Folder.job_id == job_id,
                    _below(Folder.path, ancestor.path),
                )
            )
            .order_by(Folder.depth, Folder.display_order, Folder.path)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_folders(self, job_id: UUID) -> list[Folder]:
        stmt = (
            select(Folder)
            .where(Folder.job_id == job_id)
            .order_by(Folder.depth, Folder.display_order, Folder.path)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_folder(self, job_id: UUID, path: str) -> Folder:
        folder = await self._get_folder(job_id, fp.normalize(path))
        if folder is None:
            raise FolderNotFoundError(details={"folder_path": path})
        return folder

    async def reorder_folders(self, job_id: UUID, folder_paths: list[str]) -> list[Folder]:
        """Assign ``display_order`` following the given sequence of paths."""
        normalized = [fp.normalize(path) for path in folder_paths]
        if len(set(normalized)) != len(normalized):
            raise ValidationError("Folder paths must be unique")

        folders = []
        for position, path in enumerate(normalized, start=1):
            folder = await self.get_folder(job_id, path)
            folder.display_order = position
            folders.append(folder)

        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to reorder folders: {str(e)}") from e
        return folders

    # Private helper methods
    async def _get_folder(self, job_id: UUID, path: str) -> Folder | None:
        stmt = select(Folder).where(and_(Folder.job_id == job_id, Folder.path == path))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _add_folder(
        self,
        job_id: UUID,
        path: str,
        parent: Folder | None,
        order_id: UUID | None = None,
    ) -> Folder | None:
        """Insert a folder row inside a savepoint.

        Returns ``None`` when another transaction already holds ``path``; the
        savepoint is rolled back and the outer transaction stays usable.
        """
        max_order = await self.db.execute(
            select(func.max(Folder.display_order)).where(Folder.job_id == job_id)
        )
        folder = Folder(
            job_id=job_id,
            parent_id=parent.id if parent is not None else None,
            order_id=order_id,
            path=path,
            depth=fp.depth(path),
            editor_folder_name=fp.name(path),
            is_visible=True,
            display_order=(max_order.scalar() or 0) + 1,
        )
        try:
            async with self.db.begin_nested():
                self.db.add(folder)
        except IntegrityError:
            logger.info("Folder %r in job %s was created concurrently", path, job_id)
            return None
        return folder

    async def _delete_subtree(self, job_id: UUID, path: str) -> dict[str, Any]:
        try:
            folder = await self._get_folder(job_id, path)
            if folder is None:
                raise FolderNotFoundError(details={"folder_path": path})

            file_rows = await self.db.execute(
                select(DeliverableFile.id).where(
                    and_(
                        DeliverableFile.job_id == job_id,
                        _in_subtree(DeliverableFile.folder_path, path),
                    )
                )
            )
            file_ids = list(file_rows.scalars().all())

            if file_ids:
                await self.db.execute(
                    delete(FileComment)
                    .where(FileComment.file_id.in_(file_ids))
                    .execution_options(synchronize_session=False)
                )
                await self.db.execute(
                    delete(DeliverableFile)
                    .where(DeliverableFile.id.in_(file_ids))
                    .execution_options(synchronize_session=False)
                )
            folders_result = await self.db.execute(
                delete(Folder)
                .where(
                    and_(
                        Folder.job_id == job_id,
                        _in_subtree(Folder.path, path),
                    )
                )
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except (FolderNotFoundError, SQLAlchemyError):
            await self.db.rollback()
            raise

        self._forget_deleted(job_id, path, set(file_ids))
        return {
            "folder_path": path,
            "folders_deleted": folders_result.rowcount,
            "files_deleted": len(file_ids),
        }

    def _forget_deleted(self, job_id: UUID, path: str, file_ids: set[UUID]) -> None:
        """Evict rows removed by the bulk deletes from the session."""
        for obj in list(self.db.identity_map.values()):
            # Loaded values only; never trigger a lazy load here
            loaded = inspect(obj).dict
            if isinstance(obj, Folder):
                folder_path = loaded.get("path")
                gone = loaded.get("job_id") == job_id and folder_path is not None and (
                    folder_path == path or fp.is_descendant(folder_path, path)
                )
            elif isinstance(obj, DeliverableFile):
                gone = loaded.get("id") in file_ids
            elif isinstance(obj, FileComment):
                gone = loaded.get("file_id") in file_ids
            else:
                gone = False
            if gone:
                self.db.expunge(obj)
