"""
CleanupTask Model - Compensating actions that failed and await the sweep
"""

from sqlalchemy import Column, DateTime, Integer, String, Text, Uuid
import uuid

from glance.database import Base
from glance.models.document import utcnow

CLEANUP_KINDS = ("blob", "namespace")


class CleanupTask(Base):
    """
    Logged compensating action

    Written whenever a best-effort blob deletion or vector namespace purge
    fails (upload compensation, document delete). The cleanup sweep retries
    each entry and removes it once the target is gone.

    Attributes:
        kind: "blob" (target is an object key) or "namespace" (target is a document id)
        target: What to delete
        owner_id: Owner of the deleted document, for logging
        attempts: Sweep attempts so far
        last_error: Most recent failure message
    """

    __tablename__ = "cleanup_tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    kind = Column(String(20), nullable=False, index=True)
    target = Column(String(1024), nullable=False)
    owner_id = Column(String(255))
    attempts = Column(Integer, nullable=False, default=0)
    last_error = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self):
        return f"<CleanupTask(kind={self.kind}, target={self.target}, attempts={self.attempts})>"
