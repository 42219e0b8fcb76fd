"""
Partner settings model.

One row per partner account holding the defaults applied to new orders and
the branding shown on the public delivery page.
"""

from sqlalchemy import Column, Integer, String

from .base import BaseModel


class PartnerSettings(BaseModel):
    """
    Represents the delivery preferences of a partner account.

    :ivar partner_id: Tenant identifier (unique).
    :type partner_id: str
    :ivar default_max_revision_rounds: Revision rounds granted to new orders.
    :type default_max_revision_rounds: int
    :ivar business_name: Branding shown to end customers.
    :type business_name: str
    :ivar logo_url: Branding logo shown to end customers.
    :type logo_url: str
    """

    __tablename__ = "partner_settings"

    partner_id = Column(String(128), nullable=False, unique=True)
    default_max_revision_rounds = Column(Integer, nullable=False, default=2)
    business_name = Column(String(255))
    logo_url = Column(String(1000))
