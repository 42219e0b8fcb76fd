"""
Order model.

An order is a unit of editing work, optionally attached to a job. It also
carries the revision ledger state: ``max_revision_rounds`` configured by the
partner and ``used_revision_rounds`` which only ever increases.
"""

from enum import Enum

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class OrderStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    in_revision = "in_revision"
    completed = "completed"
    cancelled = "cancelled"


class Order(BaseModel):
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("max_revision_rounds >= 0", name="ck_orders_max_rounds_non_negative"),
        CheckConstraint("used_revision_rounds >= 0", name="ck_orders_used_rounds_non_negative"),
    )

    partner_id = Column(String(128), nullable=False, index=True)
    order_number = Column(String(32), nullable=False, unique=True)
    job_id = Column(UUID(), ForeignKey("jobs.id"), index=True)
    status = Column(String(20), nullable=False, default=OrderStatus.pending.value)
    max_revision_rounds = Column(Integer, nullable=False, default=2)
    used_revision_rounds = Column(Integer, nullable=False, default=0)

    job = relationship("Job", back_populates="orders")
    files = relationship("DeliverableFile", back_populates="order")
    revision_requests = relationship("RevisionRequest", back_populates="order")

    @property
    def remaining_revision_rounds(self) -> int:
        return max(0, (self.max_revision_rounds or 0) - (self.used_revision_rounds or 0))
