"""
Customer model: the end client a job is delivered to.
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class Customer(BaseModel):
    __tablename__ = "customers"

    partner_id = Column(String(128), nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    company = Column(String(255))
    email = Column(String(255))

    jobs = relationship("Job", back_populates="customer")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
