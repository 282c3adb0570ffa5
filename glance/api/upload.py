"""
Upload API endpoint
"""

from fastapi import APIRouter, Depends, File, UploadFile
from typing import Optional
import logging

from glance.api.deps import get_current_user, get_document_service
from glance.api.documents import to_response
from glance.config import settings
from glance.core.exceptions import ValidationError
from glance.core.security import CurrentUser
from glance.schemas.document import DocumentResponse
from glance.services.document_service import DocumentService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["upload"])


@router.post("/upload", response_model=DocumentResponse)
async def upload_document(
    file: Optional[UploadFile] = File(None, description="PDF file"),
    current_user: CurrentUser = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service),
):
    """
    Upload a PDF

    The file is stored, indexed for chat and recorded. Validation failures
    leave no trace in storage or the database.

    Returns:
        DocumentResponse: "ready" on success, "error" when the text could not be indexed

    Raises:
        ValidationError: 400 for a missing, non-PDF, empty or oversize file
        StorageError: 500 if storage or the database fails
    """
    if file is None:
        raise ValidationError("No file provided")

    # One byte past the limit is enough to reject oversize uploads
    content = await file.read(settings.MAX_UPLOAD_SIZE + 1)

    document = await service.upload(
        owner_id=current_user.id,
        filename=file.filename,
        content_type=file.content_type,
        content=content,
    )
    return to_response(document)
