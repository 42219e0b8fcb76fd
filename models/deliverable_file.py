"""
Deliverable file model.

Files are produced by editors and stored in external object storage; this
row only records the metadata and the ``download_url`` handed over by the
storage collaborator. Apart from ``notes`` a file is immutable.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class DeliverableFile(BaseModel):
    __tablename__ = "deliverable_files"

    job_id = Column(UUID(), ForeignKey("jobs.id"), nullable=False, index=True)
    order_id = Column(UUID(), ForeignKey("orders.id"), nullable=False, index=True)
    # Null means the file is not in a folder and is grouped by order instead
    folder_path = Column(String(1024), index=True)
    file_name = Column(String(500), nullable=False)
    original_name = Column(String(500), nullable=False)
    file_size = Column(Integer, nullable=False, default=0)
    mime_type = Column(String(100), nullable=False)
    download_url = Column(String(2000))
    uploaded_at = Column(DateTime, nullable=False)
    notes = Column(Text)

    order = relationship("Order", back_populates="files")
