"""
SQLAlchemy Models

Models:
    - Document: uploaded PDFs and their lifecycle status
    - CleanupTask: failed compensating actions awaiting the cleanup sweep
"""

from glance.models.document import Document, DOCUMENT_STATUSES
from glance.models.cleanup_task import CleanupTask, CLEANUP_KINDS

__all__ = ["Document", "DOCUMENT_STATUSES", "CleanupTask", "CLEANUP_KINDS"]
