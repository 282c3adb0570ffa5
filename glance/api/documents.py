"""
Document API endpoints
List, fetch, star, delete and re-index the caller's PDFs
"""

from fastapi import APIRouter, Depends
from typing import List
import logging

from glance.api.deps import get_current_user, get_document_service, get_metadata_store
from glance.core.security import CurrentUser
from glance.models.document import Document
from glance.schemas.document import DocumentResponse, DeleteResponse
from glance.services.document_service import DocumentService
from glance.services.metadata_store import MetadataStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


def to_response(document: Document) -> DocumentResponse:
    """Build response (owner_id is exposed as userId)"""
    return DocumentResponse(
        id=document.id,
        user_id=document.owner_id,
        title=document.title,
        file_name=document.file_name,
        file_key=document.file_key,
        file_url=document.file_url,
        file_size=document.file_size,
        status=document.status,
        error_message=document.error_message,
        chunk_count=document.chunk_count or 0,
        is_starred=bool(document.is_starred),
        created_at=document.created_at,
        updated_at=document.updated_at,
    )


@router.get("", response_model=List[DocumentResponse])
async def list_documents(
    current_user: CurrentUser = Depends(get_current_user),
    metadata: MetadataStore = Depends(get_metadata_store),
):
    """
    List the caller's documents, newest first

    Returns:
        List[DocumentResponse]: Every document owned by the caller
    """
    documents = metadata.list_for_owner(current_user.id)
    return [to_response(document) for document in documents]


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    metadata: MetadataStore = Depends(get_metadata_store),
):
    """
    Get one document

    Raises:
        NotFoundError: 404 if missing, malformed, or owned by someone else
    """
    document = metadata.get_for_owner(current_user.id, document_id)
    return to_response(document)


@router.patch("/{document_id}", response_model=DocumentResponse)
async def toggle_star(
    document_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    metadata: MetadataStore = Depends(get_metadata_store),
):
    """Flip the document's starred flag"""
    document = metadata.get_for_owner(current_user.id, document_id)
    document = metadata.toggle_star(document)
    return to_response(document)


@router.delete("/{document_id}", response_model=DeleteResponse)
async def delete_document(
    document_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    metadata: MetadataStore = Depends(get_metadata_store),
    service: DocumentService = Depends(get_document_service),
):
    """
    Delete a document, its blob and its vector namespace

    Blob and namespace deletion are best-effort; the record is always removed.

    Raises:
        NotFoundError: 404 if missing or owned by someone else
    """
    document = metadata.get_for_owner(current_user.id, document_id)
    service.delete(document)
    return DeleteResponse(success=True)


@router.post("/{document_id}/reindex", response_model=DocumentResponse)
async def reindex_document(
    document_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    metadata: MetadataStore = Depends(get_metadata_store),
    service: DocumentService = Depends(get_document_service),
):
    """
    Rebuild the document's vector namespace from its stored PDF

    Returns:
        DocumentResponse: "ready" with the new chunk count, or "error" with the reason
    """
    document = metadata.get_for_owner(current_user.id, document_id)
    document = await service.reindex(document)
    return to_response(document)
