"""User-related Pydantic schemas."""

from typing import Optional

from .base import BaseModelSchema


class UserResponse(BaseModelSchema):
    """Schema for user response data."""

    firebase_uid: str
    email: str
    display_name: Optional[str] = None
    role: str
    partner_id: str
    is_active: bool
