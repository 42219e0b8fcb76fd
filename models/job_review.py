"""
Job review model: the single client rating of a delivered job.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class JobReview(BaseModel):
    __tablename__ = "job_reviews"
    __table_args__ = (CheckConstraint("rating BETWEEN 1 AND 5", name="ck_job_reviews_rating"),)

    job_id = Column(UUID(), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, unique=True)
    rating = Column(Integer, nullable=False)
    review = Column(Text)
    submitted_by = Column(String(255))
    submitted_by_email = Column(String(255))
    submitted_at = Column(DateTime, nullable=False)

    job = relationship("Job", back_populates="review")
