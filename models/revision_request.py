"""
Revision request model.

Each row is one consumed revision round of an order. It is inserted in the
same transaction that increments ``orders.used_revision_rounds``.
"""

from sqlalchemy import JSON, Column, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class RevisionRequest(BaseModel):
    __tablename__ = "revision_requests"

    order_id = Column(UUID(), ForeignKey("orders.id"), nullable=False, index=True)
    job_id = Column(UUID(), ForeignKey("jobs.id"), nullable=False, index=True)
    file_ids = Column(JSON, nullable=False)
    comments = Column(Text, nullable=False)
    requested_by = Column(String(255))

    order = relationship("Order", back_populates="revision_requests")
