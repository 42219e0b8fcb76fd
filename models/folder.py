"""
Folder model for the deliverable hierarchy of a job.

Folders form an explicit tree: every node has an immutable id, a
``parent_id`` reference and a denormalised materialised ``path`` (for
example ``"Photos/High Res"``) used for prefix queries and as the durable
key files are associated with. Renaming only changes
``partner_folder_name``; the path never changes once created.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class Folder(BaseModel):
    """
    Represents one node of a job's folder tree.

    :ivar path: Materialised ``/``-delimited path, unique within the job.
    :type path: str
    :ivar editor_folder_name: Name given by the producing side (last path segment).
    :type editor_folder_name: str
    :ivar partner_folder_name: Optional display override set by the partner.
    :type partner_folder_name: str
    :ivar is_visible: Whether the folder is shown on the public delivery page.
    :type is_visible: bool
    """

    __tablename__ = "folders"
    __table_args__ = (UniqueConstraint("job_id", "path", name="uq_folders_job_path"),)

    job_id = Column(UUID(), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = Column(UUID(), ForeignKey("folders.id", ondelete="CASCADE"), index=True)
    order_id = Column(UUID(), ForeignKey("orders.id"))
    path = Column(String(1024), nullable=False)
    depth = Column(Integer, nullable=False, default=1)
    editor_folder_name = Column(String(255), nullable=False)
    partner_folder_name = Column(String(255))
    is_visible = Column(Boolean, nullable=False, default=True)
    display_order = Column(Integer, nullable=False, default=0)

    job = relationship("Job", back_populates="folders")

    @property
    def display_name(self) -> str:
        return self.partner_folder_name or self.editor_folder_name

    @property
    def parent_path(self) -> str | None:
        if "/" not in self.path:
            return None
        return self.path.rsplit("/", 1)[0]
