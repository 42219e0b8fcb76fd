"""Settings controller endpoints for partner delivery preferences."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_user, require_partner_owner
from app.database import get_db
from app.domains.settings.service import SettingsService
from app.schemas.settings import PartnerSettingsResponse, PartnerSettingsUpdate
from models.user import User

router = APIRouter(prefix="/api/settings", tags=["Settings"])


@router.get("", response_model=PartnerSettingsResponse)
async def get_settings(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the delivery settings of the current user's partner account.

    Default settings are created if they don't exist yet.
    """
    settings_service = SettingsService(db)
    settings = await settings_service.get_partner_settings(current_user.partner_id)
    return PartnerSettingsResponse.model_validate(settings)


@router.put("", response_model=PartnerSettingsResponse)
async def update_settings(
    update_data: PartnerSettingsUpdate,
    current_user: User = Depends(require_partner_owner),
    db: AsyncSession = Depends(get_db),
):
    """Update the partner's delivery settings.

    Only provided fields are updated; others remain unchanged.
    """
    settings_service = SettingsService(db)
    updated_settings = await settings_service.update_partner_settings(
        partner_id=current_user.partner_id,
        default_max_revision_rounds=update_data.default_max_revision_rounds,
        business_name=update_data.business_name,
        logo_url=update_data.logo_url,
    )
    return PartnerSettingsResponse.model_validate(updated_settings)
