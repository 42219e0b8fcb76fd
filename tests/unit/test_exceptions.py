"""
Unit tests for Exception classes.

This module contains unit tests for the custom exception classes used
throughout the application and the error codes they expose.
"""

import pytest
from fastapi import HTTPException

from app.exceptions.base import (
    AppPermissionError,
    BaseAppException,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.exceptions.delivery import (
    AuthorizationError,
    DeliveryLinkNotFoundError,
    DuplicateFolderError,
    FolderNotFoundError,
    InvalidPathError,
    RevisionsExhaustedError,
)


class TestBaseAppException:
    """Test cases for BaseAppException."""

    def test_base_exception_default_values(self):
        """Test BaseAppException with default values."""
        exc = BaseAppException("Test error")

        assert exc.message == "Test error"
        assert exc.status_code == 500
        assert exc.error_code == "INTERNAL_ERROR"
        assert exc.details == {}
        assert exc.detail == {"message": "Test error", "error_code": "INTERNAL_ERROR", "details": {}}

    def test_base_exception_custom_values(self):
        """Test BaseAppException with custom values."""
        details = {"field": "value", "context": "test"}
        exc = BaseAppException(
            message="Custom error", status_code=400, error_code="CUSTOM_ERROR", details=details
        )

        assert exc.status_code == 400
        assert exc.detail["error_code"] == "CUSTOM_ERROR"
        assert exc.detail["details"] == details

    def test_base_exception_inheritance(self):
        """Test that BaseAppException inherits from HTTPException."""
        assert isinstance(BaseAppException("Test error"), HTTPException)


class TestGenericExceptions:
    """Test cases for the generic HTTP-mapped exceptions."""

    @pytest.mark.parametrize(
        "exc_class,status_code,error_code",
        [
            (NotFoundError, 404, "NOT_FOUND"),
            (AppPermissionError, 403, "PERMISSION_DENIED"),
            (ValidationError, 422, "VALIDATION_ERROR"),
            (ConflictError, 409, "CONFLICT"),
        ],
    )
    def test_status_and_code(self, exc_class, status_code, error_code):
        exc = exc_class()

        assert exc.status_code == status_code
        assert exc.error_code == error_code
        assert isinstance(exc, BaseAppException)


class TestDeliveryExceptions:
    """Test cases for folder, revision and delivery exceptions."""

    @pytest.mark.parametrize(
        "exc_class,parent,status_code,error_code",
        [
            (InvalidPathError, ValidationError, 422, "INVALID_FOLDER_PATH"),
            (FolderNotFoundError, NotFoundError, 404, "FOLDER_NOT_FOUND"),
            (DuplicateFolderError, ConflictError, 409, "DUPLICATE_FOLDER"),
            (RevisionsExhaustedError, ConflictError, 409, "REVISIONS_EXHAUSTED"),
            (AuthorizationError, AppPermissionError, 403, "AUTHORIZATION_ERROR"),
            (DeliveryLinkNotFoundError, NotFoundError, 404, "NOT_FOUND"),
        ],
    )
    def test_hierarchy_and_codes(self, exc_class, parent, status_code, error_code):
        exc = exc_class()

        assert isinstance(exc, parent)
        assert exc.status_code == status_code
        assert exc.error_code == error_code

    def test_revisions_exhausted_carries_counters(self):
        exc = RevisionsExhaustedError(details={"max_rounds": 2, "used_rounds": 2})

        assert exc.detail["details"] == {"max_rounds": 2, "used_rounds": 2}
        assert "No revision rounds remaining" in exc.message

    def test_delivery_link_miss_has_no_details(self):
        """Token misses never reveal what was looked up."""
        exc = DeliveryLinkNotFoundError()

        assert exc.message == "Delivery not found"
        assert exc.details == {}
