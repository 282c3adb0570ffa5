"""
Pydantic Schemas for Request/Response Validation

Document Schemas:
    - DocumentResponse: Single document record
    - DeleteResponse: DELETE /documents/{id}

Chat Schemas:
    - ChatRequest / ChatResponse: POST /chat/{id}
    - AnalyzeRequest / AnalyzeResponse: POST /ai/analyze

Search Schemas:
    - SearchRequest / SearchResponse: POST /search
"""

from glance.schemas.document import (
    CamelModel,
    DocumentResponse,
    DeleteResponse,
)

from glance.schemas.chat import (
    ChatRequest,
    ChatResponse,
    AnalyzeRequest,
    AnalyzeResponse,
)

from glance.schemas.search import (
    SearchRequest,
    ResearchPaper,
    SearchMetadata,
    SearchResponse,
)

__all__ = [
    "CamelModel",
    "DocumentResponse",
    "DeleteResponse",
    "ChatRequest",
    "ChatResponse",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "SearchRequest",
    "ResearchPaper",
    "SearchMetadata",
    "SearchResponse",
]
