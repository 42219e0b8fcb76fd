"""Folder tree API controller.

Every route is scoped to a job of the caller's tenant. Reads are open to
the whole team; changes require the partner owner (or an admin).
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_user, get_db, require_partner_owner, validate_token
from app.domains.folder.service import FolderService
from app.domains.job.service import JobService
from app.exceptions.base import ValidationError
from app.schemas.base import ResponseSchema
from app.schemas.folder import (
    FolderCreate,
    FolderDeleteResult,
    FolderReorder,
    FolderResponse,
    FolderUpdate,
)
from models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/jobs/{job_id}/folders",
    tags=["folders"],
    dependencies=[Depends(validate_token)],
)


def _folders_data(folders) -> list[dict]:
    return [FolderResponse.model_validate(folder).model_dump(by_alias=True) for folder in folders]


@router.get("", response_model=ResponseSchema)
async def list_folders(
    job_id: UUID = Path(..., description="Job ID"),
    parent_path: str | None = Query(None, alias="parentPath", description="Parent folder path"),
    include_all: bool = Query(False, alias="all", description="Return the whole tree"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the direct children of a folder (root folders when no parent is given)."""
    job = await JobService(db).get_job_for_user(job_id, current_user)
    service = FolderService(db)

    if include_all:
        folders = await service.list_folders(job.id)
    else:
        folders = await service.list_children(job.id, parent_path)

    return ResponseSchema(
        status="success",
        message="Folders retrieved successfully",
        data=_folders_data(folders),
    )


@router.get("/descendants", response_model=ResponseSchema)
async def list_descendants(
    job_id: UUID = Path(..., description="Job ID"),
    path: str = Query(..., description="Ancestor folder path"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List every folder below ``path`` at any depth."""
    job = await JobService(db).get_job_for_user(job_id, current_user)
    folders = await FolderService(db).list_descendants(job.id, path)

    return ResponseSchema(
        status="success",
        message="Folders retrieved successfully",
        data=_folders_data(folders),
    )


@router.post("", response_model=ResponseSchema, status_code=status.HTTP_201_CREATED)
async def create_folder(
    folder_data: FolderCreate,
    job_id: UUID = Path(..., description="Job ID"),
    current_user: User = Depends(require_partner_owner),
    db: AsyncSession = Depends(get_db),
):
    """Create a folder under ``parentPath`` or at the root."""
    job = await JobService(db).get_job_for_user(job_id, current_user)
    folder = await FolderService(db).create_folder(
        job.id, folder_data.parent_path, folder_data.name, order_id=folder_data.order_id
    )

    return ResponseSchema(
        status="success",
        message="Folder created successfully",
        data=FolderResponse.model_validate(folder).model_dump(by_alias=True),
    )


@router.patch("", response_model=ResponseSchema)
async def update_folder(
    update_data: FolderUpdate,
    job_id: UUID = Path(..., description="Job ID"),
    current_user: User = Depends(require_partner_owner),
    db: AsyncSession = Depends(get_db),
):
    """Rename a folder (display name only) and/or toggle its public visibility."""
    if update_data.display_name is None and update_data.is_visible is None:
        raise ValidationError("Nothing to update: provide displayName and/or isVisible")

    job = await JobService(db).get_job_for_user(job_id, current_user)
    folder = await FolderService(db).update_folder(
        job.id,
        update_data.folder_path,
        display_name=update_data.display_name,
        is_visible=update_data.is_visible,
    )

    return ResponseSchema(
        status="success",
        message="Folder updated successfully",
        data=FolderResponse.model_validate(folder).model_dump(by_alias=True),
    )


@router.delete("", response_model=ResponseSchema)
async def delete_folder(
    job_id: UUID = Path(..., description="Job ID"),
    path: str = Query(..., description="Folder path"),
    confirm: bool = Query(False, description="Must be true: deletes all subfolders and files"),
    current_user: User = Depends(require_partner_owner),
    db: AsyncSession = Depends(get_db),
):
    """Delete a folder with all of its subfolders and files. This cannot be undone."""
    if not confirm:
        raise ValidationError(
            "Deleting a folder removes all subfolders and files; pass confirm=true",
            details={"folder_path": path},
        )

    job = await JobService(db).get_job_for_user(job_id, current_user)
    result = await FolderService(db).delete_folder(job.id, path)

    return ResponseSchema(
        status="success",
        message="Folder deleted successfully",
        data=FolderDeleteResult(**result).model_dump(by_alias=True),
    )


@router.put("/order", response_model=ResponseSchema)
async def reorder_folders(
    reorder_data: FolderReorder,
    job_id: UUID = Path(..., description="Job ID"),
    current_user: User = Depends(require_partner_owner),
    db: AsyncSession = Depends(get_db),
):
    """Set the display order of folders."""
    job = await JobService(db).get_job_for_user(job_id, current_user)
    folders = await FolderService(db).reorder_folders(job.id, reorder_data.folder_paths)

    return ResponseSchema(
        status="success",
        message="Folders reordered successfully",
        data=_folders_data(folders),
    )
