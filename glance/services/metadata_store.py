"""
Metadata Store
Owner-scoped persistence for document records and the cleanup log
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from glance.core.exceptions import NotFoundError
from glance.models.cleanup_task import CleanupTask
from glance.models.document import Document, utcnow
from glance.utils.error_handlers import ErrorHandler

logger = logging.getLogger(__name__)


class MetadataStore:
    """
    Document and cleanup-task persistence

    Every document read takes the owner id; a record owned by someone else
    is reported exactly like a missing one (NotFoundError). Database
    failures surface as StorageError.
    """

    def __init__(self, db: Session):
        self.db = db

    def _commit(self):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise ErrorHandler.handle_database_error(e)

    # Documents

    def create_pending(
        self,
        owner_id: str,
        file_name: str,
        file_key: str,
        file_url: str,
        file_size: int,
    ) -> Document:
        """Write-ahead record in "processing" state, before the blob exists"""
        document = Document(
            owner_id=owner_id,
            title=file_name,
            file_name=file_name,
            file_key=file_key,
            file_url=file_url,
            file_size=file_size,
            status="processing",
        )
        self.db.add(document)
        self._commit()
        self.db.refresh(document)

        logger.debug(f"Created pending document {document.id} ({file_key})")
        return document

    def mark_ready(self, document: Document, chunk_count: int) -> Document:
        document.status = "ready"
        document.promoted_at = document.promoted_at or utcnow()
        document.chunk_count = chunk_count
        document.error_message = None
        self._commit()
        self.db.refresh(document)
        return document

    def mark_error(self, document: Document, message: str) -> Document:
        document.status = "error"
        document.promoted_at = document.promoted_at or utcnow()
        document.error_message = message
        self._commit()
        self.db.refresh(document)
        return document

    def mark_processing(self, document: Document) -> Document:
        document.status = "processing"
        document.error_message = None
        self._commit()
        self.db.refresh(document)
        return document

    def list_for_owner(self, owner_id: str) -> List[Document]:
        """Caller's documents, newest first"""
        try:
            return (
                self.db.query(Document)
                .filter(Document.owner_id == owner_id)
                .order_by(Document.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise ErrorHandler.handle_database_error(e)

    def get_for_owner(self, owner_id: str, document_id) -> Document:
        """
        Fetch one of the caller's documents

        Args:
            owner_id: Caller id
            document_id: UUID or its string form; malformed ids count as missing

        Raises:
            NotFoundError: Missing, malformed, or owned by another user
        """
        if not isinstance(document_id, UUID):
            try:
                document_id = UUID(str(document_id))
            except ValueError:
                raise NotFoundError("Document not found")

        try:
            document = self.db.query(Document).filter(
                Document.id == document_id,
                Document.owner_id == owner_id
            ).first()
        except SQLAlchemyError as e:
            raise ErrorHandler.handle_database_error(e)

        if not document:
            raise NotFoundError("Document not found")

        return document

    def toggle_star(self, document: Document) -> Document:
        document.is_starred = not document.is_starred
        self._commit()
        self.db.refresh(document)
        return document

    def delete(self, document: Document):
        self.db.delete(document)
        self._commit()

    def stale_pending(self, older_than_minutes: int) -> List[Document]:
        """
        Write-ahead records stuck in "processing" (any owner)

        Only records that were never promoted count: a re-index also passes
        through "processing" but keeps its original promotion time.
        """
        cutoff = datetime.now(timezone.utc) - timedelta(minutes=older_than_minutes)
        try:
            return (
                self.db.query(Document)
                .filter(
                    Document.status == "processing",
                    Document.promoted_at.is_(None),
                    Document.created_at < cutoff,
                )
                .all()
            )
        except SQLAlchemyError as e:
            raise ErrorHandler.handle_database_error(e)

    # Cleanup log

    def log_cleanup(self, kind: str, target: str, owner_id: Optional[str], error: Exception) -> Optional[CleanupTask]:
        """
        Record a failed compensating action for the sweep

        Never raises: if the log itself cannot be written, the failure is
        logged and the sweep's stale-record pass is the remaining safety net.
        """
        task = CleanupTask(kind=kind, target=target, owner_id=owner_id, last_error=str(error)[:2000])
        try:
            self.db.add(task)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to log cleanup task {kind}:{target}: {e}")
            return None

        logger.warning(f"Queued cleanup task {kind}:{target} ({error})")
        return task

    def pending_cleanup_tasks(self) -> List[CleanupTask]:
        try:
            return self.db.query(CleanupTask).order_by(CleanupTask.created_at.asc()).all()
        except SQLAlchemyError as e:
            raise ErrorHandler.handle_database_error(e)

    def complete_cleanup(self, task: CleanupTask):
        self.db.delete(task)
        self._commit()

    def record_cleanup_failure(self, task: CleanupTask, error: Exception) -> CleanupTask:
        task.attempts = (task.attempts or 0) + 1
        task.last_error = str(error)[:2000]
        self._commit()
        return task
