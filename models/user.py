"""
Provides the User model for the application's database schema.

Users are mirrored from the external identity provider (Firebase) the
first time a verified token is presented. The local row only carries what
the delivery core needs for authorization: the tenant (``partner_id``) and
the role inside that tenant.

Attributes
----------
firebase_uid : sqlalchemy.Column
    Unique identifier of the user in the identity provider.
email : sqlalchemy.Column
    The email address of the user.
display_name : sqlalchemy.Column
    Optional human readable name, used as comment author name.
role : sqlalchemy.Column
    One of ``partner``, ``photographer``, ``editor`` or ``admin``.
partner_id : sqlalchemy.Column
    Multi-tenant identifier shared by a partner and its team.
"""

from enum import Enum

from sqlalchemy import Boolean, Column, String

from .base import BaseModel


class UserRole(str, Enum):
    partner = "partner"
    photographer = "photographer"
    editor = "editor"
    admin = "admin"


class User(BaseModel):
    """
    Represents an authenticated dashboard user.

    :ivar firebase_uid: Identifier issued by Firebase Authentication.
    :type firebase_uid: str
    :ivar role: Role of the user inside its partner account.
    :type role: str
    :ivar partner_id: Tenant the user belongs to.
    :type partner_id: str
    """

    __tablename__ = "users"

    firebase_uid = Column(String(128), unique=True, nullable=False)
    email = Column(String(255), nullable=False)
    display_name = Column(String(255))
    role = Column(String(20), nullable=False, default=UserRole.partner.value)
    partner_id = Column(String(128), nullable=False, index=True)
    is_active = Column(Boolean, default=True)

    @property
    def can_manage_deliveries(self) -> bool:
        return self.role in (UserRole.partner.value, UserRole.admin.value)
