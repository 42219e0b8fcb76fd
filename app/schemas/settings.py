"""Partner settings schemas."""

from pydantic import Field

from .base import BaseModelSchema, BaseSchema


class PartnerSettingsResponse(BaseModelSchema):
    """Schema for partner settings response data."""

    partner_id: str
    default_max_revision_rounds: int
    business_name: str | None = None
    logo_url: str | None = None


class PartnerSettingsUpdate(BaseSchema):
    """Schema for updating partner settings (all fields optional)."""

    default_max_revision_rounds: int | None = Field(
        None, ge=0, le=50, description="Revision rounds granted to new orders"
    )
    business_name: str | None = Field(None, max_length=255)
    logo_url: str | None = Field(None, max_length=1000)
