# app/domains/settings/service.py
"""Settings service for partner delivery preferences."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings as app_settings
from app.exceptions.base import ValidationError
from models import PartnerSettings

logger = logging.getLogger(__name__)


class SettingsService:
    """Service for managing partner settings."""

    def __init__(self, db: AsyncSession):
        """Initialize service with a database session."""
        self.db = db

    async def get_partner_settings(self, partner_id: str) -> PartnerSettings:
        """
        Get partner settings, creating them with defaults if they don't exist.

        Args:
            partner_id: Tenant identifier

        Returns:
            PartnerSettings: The partner's settings object
        """
        settings = await self.find_partner_settings(partner_id)
        if not settings:
            settings = await self.create_default_settings(partner_id)
        return settings

    async def find_partner_settings(self, partner_id: str) -> PartnerSettings | None:
        result = await self.db.execute(
            select(PartnerSettings).where(PartnerSettings.partner_id == partner_id)
        )
        return result.scalar_one_or_none()

    async def create_default_settings(self, partner_id: str) -> PartnerSettings:
        settings = PartnerSettings(
            partner_id=partner_id,
            default_max_revision_rounds=app_settings.default_max_revision_rounds,
        )

        try:
            self.db.add(settings)
            await self.db.commit()
            await self.db.refresh(settings)
            return settings
        except IntegrityError:
            # Another request created the row first
            await self.db.rollback()
            existing = await self.find_partner_settings(partner_id)
            if existing is None:
                raise
            return existing
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise e

    async def get_default_max_revision_rounds(self, partner_id: str) -> int:
        """Revision rounds granted to new orders of ``partner_id``."""
        settings = await self.find_partner_settings(partner_id)
        if settings is None:
            return app_settings.default_max_revision_rounds
        return settings.default_max_revision_rounds

    async def update_partner_settings(
        self,
        partner_id: str,
        default_max_revision_rounds: int | None = None,
        business_name: str | None = None,
        logo_url: str | None = None,
    ) -> PartnerSettings:
        """
        Update partner settings. Only provided fields are changed.

        Raises:
            ValidationError: If the revision default is out of range
        """
        if default_max_revision_rounds is not None and not 0 <= default_max_revision_rounds <= 50:
            raise ValidationError("Default revision rounds must be between 0 and 50")

        settings = await self.get_partner_settings(partner_id)

        if default_max_revision_rounds is not None:
            settings.default_max_revision_rounds = default_max_revision_rounds
        if business_name is not None:
            settings.business_name = business_name.strip() or None
        if logo_url is not None:
            settings.logo_url = logo_url.strip() or None

        try:
            await self.db.commit()
            await self.db.refresh(settings)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise e

        logger.info("Updated delivery settings for partner %s", partner_id)
        return settings
