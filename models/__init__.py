"""
Models package initialization.
"""

from .base import Base, BaseModel
from .customer import Customer
from .deliverable_file import DeliverableFile
from .delivery_email import DeliveryEmail
from .file_comment import CommentAuthorRole, CommentStatus, FileComment
from .folder import Folder
from .job import Job, JobStatus
from .job_review import JobReview
from .order import Order, OrderStatus
from .partner_settings import PartnerSettings
from .revision_request import RevisionRequest
from .user import User, UserRole

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "UserRole",
    "PartnerSettings",
    "Customer",
    "Job",
    "JobStatus",
    "Order",
    "OrderStatus",
    "Folder",
    "DeliverableFile",
    "RevisionRequest",
    "FileComment",
    "CommentAuthorRole",
    "CommentStatus",
    "JobReview",
    "DeliveryEmail",
]
