# app/domains/user/service.py
import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from models import User, UserRole

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_firebase_uid(self, firebase_uid: str) -> Optional[User]:
        """Get a user by Firebase UID."""
        result = await self.db.execute(select(User).where(User.firebase_uid == firebase_uid))
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def create_user(
        self,
        firebase_uid: str,
        email: str,
        partner_id: str,
        role: str = UserRole.partner.value,
        display_name: str | None = None,
    ) -> User:
        """Create a new user."""
        user = User(
            firebase_uid=firebase_uid,
            email=email,
            partner_id=partner_id,
            role=role,
            display_name=display_name,
        )

        try:
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
            return user
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise e

    async def get_or_create_user(self, firebase_uid: str, claims: dict[str, Any]) -> User:
        """Get existing user or create new one from verified token claims.

        ``role`` and ``partnerId`` are Firebase custom claims. A user without a
        ``partnerId`` claim is a partner owning a tenant named after its uid.
        """
        user = await self.get_user_by_firebase_uid(firebase_uid)
        if user:
            return user

        role = claims.get("role") or UserRole.partner.value
        if role not in {r.value for r in UserRole}:
            role = UserRole.photographer.value

        try:
            return await self.create_user(
                firebase_uid=firebase_uid,
                email=claims.get("email") or f"{firebase_uid}@users.invalid",
                partner_id=claims.get("partnerId") or firebase_uid,
                role=role,
                display_name=claims.get("name"),
            )
        except IntegrityError:
            # Concurrent first requests of the same user
            logger.info("User %s created concurrently, reloading", firebase_uid)
            user = await self.get_user_by_firebase_uid(firebase_uid)
            if user is None:
                raise
            return user
