"""
Chat API endpoints
Retrieval-augmented Q&A over one document, plus the editor's writing assistant
"""

from fastapi import APIRouter, Depends
import logging

from glance.api.deps import (
    get_chat_service,
    get_current_user,
    get_metadata_store,
    get_writing_service,
)
from glance.core.security import CurrentUser
from glance.schemas.chat import AnalyzeRequest, AnalyzeResponse, ChatRequest, ChatResponse
from glance.services.chat_service import ChatService, require_text
from glance.services.metadata_store import MetadataStore
from glance.services.writing_service import WritingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


@router.post("/chat/{document_id}", response_model=ChatResponse)
async def chat_with_document(
    document_id: str,
    request: ChatRequest,
    current_user: CurrentUser = Depends(get_current_user),
    metadata: MetadataStore = Depends(get_metadata_store),
    chat_service: ChatService = Depends(get_chat_service),
):
    """
    Ask a question about a document

    Raises:
        ValidationError: 400 for a blank message or a document still processing
        NotFoundError: 404 if the document is missing or not owned
        ExtractionError: 500 if the document has no indexed text
        QuotaExceededError: 429 when the model quota is exhausted
        EmptyResponseError: 502 when the model returns nothing
        UpstreamError: 503 for other model or vector database failures
    """
    message = require_text(request.message, "Message is required")
    document = metadata.get_for_owner(current_user.id, document_id)

    result = await chat_service.chat(document, message)
    return ChatResponse(**result)


@router.post("/ai/analyze", response_model=AnalyzeResponse)
async def analyze_text(
    request: AnalyzeRequest,
    current_user: CurrentUser = Depends(get_current_user),
    writing_service: WritingService = Depends(get_writing_service),
):
    """
    Writing assistant: run an editor prompt, optionally through a rewrite preset

    Raises:
        ValidationError: 400 for a blank prompt
        QuotaExceededError / UpstreamError: model failures
    """
    response = await writing_service.analyze(request.prompt, request.action)
    return AnalyzeResponse(response=response)
