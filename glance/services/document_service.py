"""
Document Service
Upload, re-index and delete documents across the metadata store, blob
storage and the vector index.

Blob storage and the database cannot share a transaction, so every upload
starts with a write-ahead "processing" record and each step compensates for
the ones before it. Compensations are best-effort: a failed one is logged in
the cleanup log and retried by the cleanup sweep.
"""

from typing import Optional
import asyncio
import logging

from glance.config import settings
from glance.core.exceptions import (
    ExtractionError,
    StorageError,
    UpstreamError,
    ValidationError,
)
from glance.models.document import Document
from glance.parsers.pdf_parser import download_pdf, extract_pages
from glance.services.metadata_store import MetadataStore
from glance.services.vector_indexer import VectorIndexer
from glance.storage.base import StorageBackend, build_object_key
from glance.utils.error_handlers import ErrorHandler
from glance.utils.sanitize import get_safe_user_display

logger = logging.getLogger(__name__)

INDEXING_FAILED = "Failed to index document"


def validate_upload(filename: Optional[str], content_type: Optional[str], size: int):
    """
    Reject bad uploads before any side effect

    Raises:
        ValidationError: Missing file, non-PDF type, empty or oversize content
    """
    if not filename:
        raise ValidationError("No file provided")

    if not content_type or "pdf" not in content_type.lower():
        raise ValidationError("Only PDF files are allowed")

    if size == 0:
        raise ValidationError("File is empty")

    if size > settings.MAX_UPLOAD_SIZE:
        limit_mb = settings.MAX_UPLOAD_SIZE // (1024 * 1024)
        raise ValidationError(f"File size must be less than {limit_mb}MB")


class DocumentService:
    """Document lifecycle across database, blob storage and vector index"""

    def __init__(self, metadata: MetadataStore, storage: StorageBackend, indexer: VectorIndexer):
        self.metadata = metadata
        self.storage = storage
        self.indexer = indexer

    async def upload(
        self,
        owner_id: str,
        filename: Optional[str],
        content_type: Optional[str],
        content: bytes,
    ) -> Document:
        """
        Store and index an uploaded PDF

        Steps: validate, write-ahead record, blob PUT, index, promote.
        Indexing failures leave the record in "error" with the reason and
        keep the blob so the user can still delete it.

        Returns:
            Document: The promoted record ("ready", or "error" if indexing failed)

        Raises:
            ValidationError: Bad input (no side effects)
            StorageError: Database or blob storage failure (after compensation)
        """
        validate_upload(filename, content_type, len(content))

        key = build_object_key(owner_id, filename)
        file_url = self.storage.get_url(key)

        document = self.metadata.create_pending(
            owner_id=owner_id,
            file_name=filename,
            file_key=key,
            file_url=file_url,
            file_size=len(content),
        )

        # Captured now: after a failed commit the instance is expired
        document_id = str(document.id)

        try:
            await asyncio.to_thread(self.storage.save, key, content, content_type)
        except Exception as e:
            self._purge_pending(document)
            raise ErrorHandler.handle_storage_error(e)

        logger.info(
            f"Stored upload {document_id} for {get_safe_user_display(owner_id)}: "
            f"{key} ({len(content)} bytes)"
        )

        chunk_count = 0
        failure: Optional[str] = None
        if settings.INDEX_ON_UPLOAD:
            try:
                chunk_count = await self._index(document_id, content)
            except (ExtractionError, UpstreamError) as e:
                logger.warning(f"Indexing failed for document {document_id}: {e.message}")
                failure = e.message
            except Exception:
                logger.exception(f"Unexpected indexing failure for document {document_id}")
                failure = INDEXING_FAILED

        try:
            if failure is None:
                document = self.metadata.mark_ready(document, chunk_count)
            else:
                document = self.metadata.mark_error(document, failure)
        except StorageError:
            self._compensate_failed_promotion(document_id, key, owner_id, indexed=chunk_count > 0)
            raise

        return document

    async def reindex(self, document: Document) -> Document:
        """
        Rebuild a document's namespace from its stored blob

        The namespace is purged first, so re-indexing never duplicates windows.
        Any failure leaves the record in "error", never in "processing".
        """
        document_id = str(document.id)
        self.metadata.mark_processing(document)

        try:
            content = await download_pdf(document.file_url)
            await asyncio.to_thread(self.indexer.delete_namespace, document_id)
            chunk_count = await self._index(document_id, content)
        except (ExtractionError, UpstreamError) as e:
            logger.warning(f"Re-indexing failed for document {document_id}: {e.message}")
            return self.metadata.mark_error(document, e.message)
        except Exception:
            logger.exception(f"Unexpected re-indexing failure for document {document_id}")
            return self.metadata.mark_error(document, INDEXING_FAILED)

        logger.info(f"Re-indexed document {document_id}: {chunk_count} windows")
        return self.metadata.mark_ready(document, chunk_count)

    async def _index(self, document_id: str, content: bytes) -> int:
        pages = await asyncio.to_thread(extract_pages, content)
        return await self.indexer.index_document(document_id, pages)

    def delete(self, document: Document):
        """
        Delete a document everywhere

        Blob and namespace removal are best-effort; failures go to the
        cleanup log. The record is deleted regardless.
        """
        owner_id = document.owner_id
        document_id = str(document.id)
        key = self.storage.key_from_url(document.file_url) or document.file_key

        self._delete_blob(key, owner_id)
        self._delete_namespace(document_id, owner_id)

        self.metadata.delete(document)
        logger.info(f"Deleted document {document_id} for {get_safe_user_display(owner_id)}")

    # Compensation helpers

    def _delete_blob(self, key: str, owner_id: Optional[str]) -> bool:
        try:
            self.storage.delete(key)
            return True
        except Exception as e:
            logger.error(f"Failed to delete blob {key}: {e}")
            self.metadata.log_cleanup("blob", key, owner_id, e)
            return False

    def _delete_namespace(self, document_id: str, owner_id: Optional[str]) -> bool:
        try:
            self.indexer.delete_namespace(document_id)
            return True
        except Exception as e:
            logger.error(f"Failed to purge vector namespace {document_id}: {e}")
            self.metadata.log_cleanup("namespace", document_id, owner_id, e)
            return False

    def _purge_pending(self, document: Document):
        """Blob PUT failed: drop the write-ahead record"""
        document_id = str(document.id)
        try:
            self.metadata.delete(document)
        except StorageError:
            # The sweep removes stale "processing" rows
            logger.error(f"Failed to purge write-ahead record {document_id}")

    def _compensate_failed_promotion(self, document_id: str, key: str, owner_id: str, indexed: bool):
        """Record could not be promoted: remove what was written outside the database"""
        logger.error(f"Failed to promote document {document_id}; removing its blob")
        self._delete_blob(key, owner_id)
        if indexed:
            self._delete_namespace(document_id, owner_id)
