"""
File comment model: one entry of the append-only discussion thread of a file.
"""

from enum import Enum

from sqlalchemy import Column, ForeignKey, String, Text

from .base import UUID, BaseModel


class CommentAuthorRole(str, Enum):
    client = "client"
    photographer = "photographer"
    editor = "editor"


class CommentStatus(str, Enum):
    open = "open"
    in_progress = "in_progress"
    resolved = "resolved"


class FileComment(BaseModel):
    __tablename__ = "file_comments"

    file_id = Column(
        UUID(), ForeignKey("deliverable_files.id", ondelete="CASCADE"), nullable=False, index=True
    )
    job_id = Column(UUID(), ForeignKey("jobs.id"), nullable=False, index=True)
    order_id = Column(UUID(), ForeignKey("orders.id"))
    author_id = Column(String(128), nullable=False)
    author_name = Column(String(255), nullable=False)
    author_role = Column(String(20), nullable=False)
    message = Column(Text, nullable=False)
    status = Column(String(20))  # open, in_progress, resolved or null for plain discussion
