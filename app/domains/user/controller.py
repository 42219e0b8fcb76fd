"""User profile endpoints."""

from fastapi import APIRouter, Depends

from app.core.dependencies import get_current_user
from app.schemas.user import UserResponse
from models.user import User

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current authenticated user information.

    The local user row is created from the verified token on first use, so
    this also reports the tenant and role the dashboard acts with.
    """
    return UserResponse.model_validate(current_user)
