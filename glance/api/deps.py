"""
FastAPI dependencies
Authentication, services, rate limiting
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from glance.core.exceptions import AuthenticationError
from glance.core.security import CurrentUser, verify_session_token
from glance.database import get_db
from glance.middleware.rate_limiter import RateLimiter
from glance.services.metadata_store import MetadataStore


async def get_current_user(
    authorization: Optional[str] = Header(None, description="Bearer session token")
) -> CurrentUser:
    """
    Resolve the caller from the identity provider's session token

    Args:
        authorization: Authorization header (format: "Bearer <jwt>")

    Returns:
        CurrentUser: Authenticated caller

    Raises:
        AuthenticationError: 401 if the header is missing or the token is invalid
    """
    if not authorization:
        raise AuthenticationError("Unauthorized")

    # Validate header format
    if not authorization.startswith("Bearer "):
        raise AuthenticationError("Invalid authorization header format")

    token = authorization[7:].strip()
    if not token:
        raise AuthenticationError("Session token missing")

    return verify_session_token(token)


def get_metadata_store(db: Session = Depends(get_db)) -> MetadataStore:
    return MetadataStore(db)


def get_search_rate_limiter(request: Request) -> RateLimiter:
    """Search limiter created at startup (see setup_rate_limiting)"""
    return request.app.state.search_rate_limiter


# ==============================================================================
# Service Singletons
# ==============================================================================
# Clients are built on first use and shared by every request


@lru_cache(maxsize=1)
def get_storage():
    """
    Get singleton storage backend

    Returns:
        StorageBackend: S3 storage
    """
    from glance.storage.factory import get_storage_backend
    return get_storage_backend()


@lru_cache(maxsize=1)
def get_vector_store():
    """
    Get singleton Chroma vector store

    Connects to the server lazily on first query
    """
    from glance.vector_store.chroma_store import ChromaVectorStore
    return ChromaVectorStore()


@lru_cache(maxsize=1)
def get_embedder():
    """
    Get singleton OpenAIEmbedder

    Prevents OpenAI client re-initialization on every request
    """
    from glance.embeddings.openai_embedder import OpenAIEmbedder
    return OpenAIEmbedder()


@lru_cache(maxsize=1)
def get_indexer():
    from glance.services.vector_indexer import VectorIndexer
    return VectorIndexer(embedder=get_embedder(), vector_store=get_vector_store())


def get_document_service(
    metadata: MetadataStore = Depends(get_metadata_store),
    storage=Depends(get_storage),
    indexer=Depends(get_indexer),
):
    from glance.services.document_service import DocumentService
    return DocumentService(metadata=metadata, storage=storage, indexer=indexer)


def get_chat_service(indexer=Depends(get_indexer)):
    from glance.services.chat_service import ChatService
    return ChatService(indexer=indexer, prompt_builder=get_prompt_builder())


@lru_cache(maxsize=1)
def get_prompt_builder():
    from glance.prompts.base import PromptBuilder
    return PromptBuilder()


def get_writing_service():
    from glance.services.writing_service import WritingService
    return WritingService(prompt_builder=get_prompt_builder())


@lru_cache(maxsize=1)
def get_search_service():
    from glance.services.search_service import AcademicSearchService
    return AcademicSearchService()
