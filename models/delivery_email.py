"""
Delivery email model: audit trail of delivery links sent to customers.
"""

from sqlalchemy import Column, DateTime, ForeignKey, String

from .base import UUID, BaseModel


class DeliveryEmail(BaseModel):
    __tablename__ = "delivery_emails"

    job_id = Column(UUID(), ForeignKey("jobs.id"), nullable=False, index=True)
    recipient_email = Column(String(255), nullable=False)
    subject = Column(String(500), nullable=False)
    sent_by = Column(UUID(), ForeignKey("users.id"))
    sent_at = Column(DateTime, nullable=False)
