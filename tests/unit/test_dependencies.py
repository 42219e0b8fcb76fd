"""
Unit tests for Dependencies module.

This module contains unit tests for the dependency injection functions
used throughout the application.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException, status

from app.core.dependencies import get_current_user, require_partner_owner, validate_token
from app.exceptions.delivery import AuthorizationError
from models.user import User


def _credentials(value):
    token = MagicMock()
    token.credentials = value
    return token


class TestValidateToken:
    """Test cases for validate_token dependency."""

    @pytest.mark.asyncio
    async def test_validate_token_success(self):
        """Test successful token validation."""
        payload = {"sub": "uid_123", "email": "owner@acme-photo.com"}

        with patch(
            "app.core.dependencies.auth.verify_token", new_callable=AsyncMock
        ) as mock_verify:
            mock_verify.return_value = payload

            result = await validate_token(_credentials("valid_jwt_token"))

        assert result == payload
        mock_verify.assert_awaited_once_with("valid_jwt_token")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, _credentials(""), _credentials(None)])
    async def test_validate_token_missing(self, token):
        """Test token validation without credentials."""
        with pytest.raises(HTTPException) as exc_info:
            await validate_token(token)

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert "Authentication token is required" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_validate_token_empty_payload(self):
        """Test token validation when verification returns nothing."""
        with patch(
            "app.core.dependencies.auth.verify_token", new_callable=AsyncMock
        ) as mock_verify:
            mock_verify.return_value = None

            with pytest.raises(HTTPException) as exc_info:
                await validate_token(_credentials("invalid_token"))

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert "Invalid authentication token" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_validate_token_unexpected_error(self):
        """Test token validation when verification raises an unexpected error."""
        with patch(
            "app.core.dependencies.auth.verify_token", new_callable=AsyncMock
        ) as mock_verify:
            mock_verify.side_effect = RuntimeError("boom")

            with pytest.raises(HTTPException) as exc_info:
                await validate_token(_credentials("problematic_token"))

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert exc_info.value.detail == "Authentication failed"


class TestGetCurrentUser:
    """Test cases for get_current_user dependency."""

    @pytest.mark.asyncio
    async def test_creates_user_from_claims(self, test_db):
        """First request of a user mirrors it from the token claims."""
        request = MagicMock()
        payload = {
            "sub": "firebase_uid_new",
            "email": "new@acme-photo.com",
            "role": "photographer",
            "partnerId": "partner_acme",
        }

        user = await get_current_user(request, payload, test_db)

        assert user.firebase_uid == "firebase_uid_new"
        assert user.role == "photographer"
        assert user.partner_id == "partner_acme"
        assert request.state.user_id == user.id
        assert request.state.partner_id == "partner_acme"

    @pytest.mark.asyncio
    async def test_uses_user_id_claim(self, test_db, partner_user):
        request = MagicMock()

        user = await get_current_user(request, {"user_id": partner_user.firebase_uid}, test_db)

        assert user.id == partner_user.id

    @pytest.mark.asyncio
    async def test_missing_subject(self, test_db):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(MagicMock(), {"email": "x@y.com"}, test_db)

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_inactive_user(self, test_db, partner_user):
        partner_user.is_active = False
        await test_db.commit()

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(MagicMock(), {"sub": partner_user.firebase_uid}, test_db)

        assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_service_error(self):
        db = MagicMock()
        db.execute = AsyncMock(side_effect=RuntimeError("db down"))

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(MagicMock(), {"sub": "uid"}, db)

        assert exc_info.value.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR


class TestRequirePartnerOwner:
    """Test cases for require_partner_owner."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", ["partner", "admin"])
    async def test_managers_allowed(self, role):
        user = User(role=role, partner_id="partner_acme")

        assert await require_partner_owner(user) is user

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", ["photographer", "editor"])
    async def test_others_rejected(self, role):
        user = User(role=role, partner_id="partner_acme")

        with pytest.raises(AuthorizationError):
            await require_partner_owner(user)
