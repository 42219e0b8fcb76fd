"""Application exceptions."""

from .base import AppPermissionError, BaseAppException, ConflictError, NotFoundError, ValidationError
from .delivery import (
    AuthorizationError,
    DeliveryLinkNotFoundError,
    DuplicateFolderError,
    FolderNotFoundError,
    InvalidPathError,
    RevisionsExhaustedError,
)

__all__ = [
    "BaseAppException",
    "NotFoundError",
    "AppPermissionError",
    "ValidationError",
    "ConflictError",
    "InvalidPathError",
    "FolderNotFoundError",
    "DuplicateFolderError",
    "RevisionsExhaustedError",
    "AuthorizationError",
    "DeliveryLinkNotFoundError",
]
