"""
Job model.

A job is one property shoot. It owns the orders sent to editors, the
deliverable folder tree and, once a delivery email has been sent, the
opaque ``delivery_token`` that grants the end customer access to the public
delivery page.
"""

from enum import Enum

from sqlalchemy import Column, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class JobStatus(str, Enum):
    booked = "booked"
    pending = "pending"
    on_hold = "on_hold"
    delivered = "delivered"
    cancelled = "cancelled"


class Job(BaseModel):
    """
    Represents a photography job owned by a partner account.

    :ivar partner_id: Owning tenant.
    :type partner_id: str
    :ivar delivery_token: Opaque capability for the public delivery page;
        ``None`` until the first delivery link is requested.
    :type delivery_token: str
    """

    __tablename__ = "jobs"

    partner_id = Column(String(128), nullable=False, index=True)
    job_number = Column(String(32), nullable=False, unique=True)
    customer_id = Column(UUID(), ForeignKey("customers.id"))
    address = Column(String(500), nullable=False)
    status = Column(String(20), nullable=False, default=JobStatus.booked.value)
    delivery_token = Column(String(128), unique=True, index=True)
    notes = Column(Text)

    # Relationships
    customer = relationship("Customer", back_populates="jobs")
    orders = relationship("Order", back_populates="job")
    folders = relationship("Folder", back_populates="job", cascade="all, delete-orphan")
    review = relationship(
        "JobReview", back_populates="job", uselist=False, cascade="all, delete-orphan"
    )

    @property
    def has_delivery_link(self) -> bool:
        return self.delivery_token is not None
