"""Revision configuration endpoints for orders."""

from uuid import UUID

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_user, get_db, require_partner_owner, validate_token
from app.domains.delivery import index
from app.domains.job.service import JobService
from app.domains.revision.service import RevisionService
from app.schemas.base import ResponseSchema
from app.schemas.revision import RevisionConfigUpdate, RevisionStatus
from models.user import User

router = APIRouter(
    prefix="/api/orders",
    tags=["revisions"],
    dependencies=[Depends(validate_token)],
)


@router.get("/{order_id}/revisions", response_model=ResponseSchema)
async def get_revision_status(
    order_id: UUID = Path(..., description="Order ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Configured, used and remaining revision rounds of an order."""
    order = await JobService(db).get_order_for_user(order_id, current_user)
    revision_status = index.revision_status(order)

    return ResponseSchema(
        status="success",
        message="Revision status retrieved successfully",
        data=RevisionStatus(**revision_status).model_dump(by_alias=True),
    )


@router.patch("/{order_id}/revisions", response_model=ResponseSchema)
async def configure_revision_rounds(
    config: RevisionConfigUpdate,
    order_id: UUID = Path(..., description="Order ID"),
    current_user: User = Depends(require_partner_owner),
    db: AsyncSession = Depends(get_db),
):
    """Change how many revision rounds the order allows."""
    order = await JobService(db).get_order_for_user(order_id, current_user)
    order = await RevisionService(db).configure_max_rounds(order, config.max_rounds)

    return ResponseSchema(
        status="success",
        message="Revision rounds updated successfully",
        data=RevisionStatus(**index.revision_status(order)).model_dump(by_alias=True),
    )
