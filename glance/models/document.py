"""
Document Model - Uploaded PDFs and their metadata
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, Uuid
import uuid

from glance.database import Base

DOCUMENT_STATUSES = ("processing", "ready", "error")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Document(Base):
    """
    Document model - one record per uploaded PDF

    Attributes:
        id: Unique document identifier (UUID), also the vector namespace
        owner_id: Identity-provider user id; immutable, filters every query

        title: Display title (defaults to the original filename)
        file_name: Original filename
        file_key: Object storage key (globally unique)
        file_url: Public URL of the blob
        file_size: Uploaded byte length

        status: processing (write-ahead, before blob + indexing), ready, error
        error_message: Why indexing failed when status is error
        chunk_count: Number of windows written to the vector namespace
        is_starred: User flag toggled from the document grid

        promoted_at: When the first upload finished (ready or error); unset
            only for write-ahead records whose upload never completed
        created_at: Upload timestamp
        updated_at: Last modification timestamp
    """

    __tablename__ = "documents"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(String(255), nullable=False, index=True)

    # File metadata
    title = Column(String(512), nullable=False)
    file_name = Column(String(512), nullable=False)
    file_key = Column(String(1024), nullable=False, unique=True)
    file_url = Column(String(2048), nullable=False)
    file_size = Column(Integer, nullable=False)

    # Lifecycle
    status = Column(String(20), nullable=False, default="processing", index=True)
    error_message = Column(Text)
    chunk_count = Column(Integer, nullable=False, default=0)
    is_starred = Column(Boolean, nullable=False, default=False)
    promoted_at = Column(DateTime(timezone=True))

    # Python-side defaults keep sub-second ordering on every backend
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Document(id={self.id}, file_name={self.file_name}, status={self.status})>"
