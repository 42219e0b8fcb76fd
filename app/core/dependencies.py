# app/core/dependencies.py
import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import FirebaseAuthenticator
from app.database import get_db
from app.domains.user.service import UserService
from app.exceptions.delivery import AuthorizationError
from models import User

logger = logging.getLogger(__name__)

security = HTTPBearer()
auth = FirebaseAuthenticator()


async def validate_token(token: HTTPAuthorizationCredentials = Depends(security)) -> dict:
    """Validate and decode a Firebase ID token.

    Returns:
        dict: Decoded token payload

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        if not token or not token.credentials:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication token is required",
                headers={"WWW-Authenticate": "Bearer"},
            )

        payload = await auth.verify_token(token.credentials)

        if not payload:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authentication token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        return payload

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Token validation error: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


async def get_current_user(
    request: Request,
    payload: dict = Depends(validate_token),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get current authenticated user from the token payload.

    Returns:
        User: Current authenticated user

    Raises:
        HTTPException: If user not found or inactive
    """
    try:
        firebase_uid = payload.get("sub") or payload.get("user_id")

        if not firebase_uid:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token payload - missing user ID",
            )

        # Get or create user in local database
        user_service = UserService(db)
        user = await user_service.get_or_create_user(firebase_uid, payload)

        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive"
            )

        # Add user info to request state for logging
        request.state.user_id = user.id
        request.state.partner_id = user.partner_id

        return user

    except HTTPException:
        raise
    except Exception as e:
        logger.error("User authentication error: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication service error",
        ) from e


async def require_partner_owner(current_user: User = Depends(get_current_user)) -> User:
    """Current user, provided it may manage deliveries (partner or admin).

    Raises:
        AuthorizationError: For photographers, editors and other roles.
    """
    if not current_user.can_manage_deliveries:
        raise AuthorizationError(details={"role": current_user.role})
    return current_user
