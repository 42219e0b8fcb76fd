# ruff: noqa: D107
"""Folder, revision and delivery-link exceptions."""

from typing import Any

from .base import AppPermissionError, ConflictError, NotFoundError, ValidationError


class InvalidPathError(ValidationError):
    """Raised when a folder path or segment is empty, blank or malformed."""

    def __init__(self, message: str = "Invalid folder path", details: dict[str, Any] | None = None):
        super().__init__(message=message, details=details, error_code="INVALID_FOLDER_PATH")


class FolderNotFoundError(NotFoundError):
    """Raised when a folder path does not exist in the job."""

    def __init__(self, message: str = "Folder not found", details: dict[str, Any] | None = None):
        super().__init__(message=message, details=details, error_code="FOLDER_NOT_FOUND")


class DuplicateFolderError(ConflictError):
    """Raised when a sibling folder with the same path already exists."""

    def __init__(
        self,
        message: str = "A folder with this name already exists here",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message=message, details=details, error_code="DUPLICATE_FOLDER")


class RevisionsExhaustedError(ConflictError):
    """Raised when an order has no revision rounds left."""

    def __init__(
        self,
        message: str = "No revision rounds remaining for this order",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message=message, details=details, error_code="REVISIONS_EXHAUSTED")


class AuthorizationError(AppPermissionError):
    """Raised when an authenticated user may not perform an internal mutation."""

    def __init__(
        self,
        message: str = "Only the owning partner can perform this action",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message=message, details=details, error_code="AUTHORIZATION_ERROR")


class DeliveryLinkNotFoundError(NotFoundError):
    """Raised for any miss behind a delivery token.

    Unknown tokens, files of other jobs and files hidden from the public page
    all produce this same error so callers cannot probe for existence.
    """

    def __init__(self, message: str = "Delivery not found"):
        super().__init__(message=message)
