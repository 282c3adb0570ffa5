"""
Chat Service - Retrieval-augmented Q&A over one document
Supports 100+ model providers via LiteLLM
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

import litellm
from openai import APIError

from glance.config import settings
from glance.core.exceptions import EmptyResponseError, ExtractionError, ValidationError
from glance.models.document import Document
from glance.prompts.base import PromptBuilder
from glance.services.vector_indexer import VectorIndexer
from glance.utils.error_handlers import ErrorHandler

# Configure litellm to automatically drop unsupported parameters
litellm.drop_params = True

logger = logging.getLogger(__name__)


def _get_model_string() -> str:
    """LiteLLM model string: provider/model, unless the model already names its provider"""
    if "/" in settings.CHAT_MODEL:
        return settings.CHAT_MODEL
    return f"{settings.LLM_PROVIDER}/{settings.CHAT_MODEL}"


def _get_litellm_kwargs() -> Dict[str, Any]:
    model_string = _get_model_string()

    kwargs = {
        "model": model_string,
        "timeout": settings.LLM_TIMEOUT,
        "temperature": settings.CHAT_TEMPERATURE,
        "max_tokens": settings.CHAT_MAX_TOKENS,
        "presence_penalty": settings.CHAT_PRESENCE_PENALTY,
        "frequency_penalty": settings.CHAT_FREQUENCY_PENALTY,
    }

    # Add API key if using OpenAI
    if model_string.startswith("openai/") and settings.OPENAI_API_KEY:
        kwargs["api_key"] = settings.OPENAI_API_KEY

    return kwargs


def require_text(value: Optional[str], message: str) -> str:
    """Reject missing or blank request text"""
    if value is None or not value.strip():
        raise ValidationError(message)
    return value.strip()


async def complete_chat(messages: List[Dict[str, str]]) -> str:
    """
    Run one chat completion

    Raises:
        QuotaExceededError: Quota or rate limit exhausted (retryable)
        UpstreamError: Any other API failure
        EmptyResponseError: The model returned no content
    """
    try:
        response = await litellm.acompletion(
            **_get_litellm_kwargs(),
            messages=messages,
        )
    except APIError as e:
        raise ErrorHandler.handle_llm_error(e, provider=settings.LLM_PROVIDER)

    content = None
    if response.choices:
        content = response.choices[0].message.content

    if not content or not content.strip():
        logger.warning("Completion returned no content")
        raise EmptyResponseError()

    return content.strip()


class ChatService:
    """
    Answers questions about a single document

    Semantic retrieval: the question is embedded, the top-k windows of the
    document's namespace are fetched (most similar first) and sent to the
    model as context. No history is kept server-side.
    """

    def __init__(self, indexer: VectorIndexer, prompt_builder: PromptBuilder = None):
        self.indexer = indexer
        self.prompt_builder = prompt_builder or PromptBuilder()

    async def chat(self, document: Document, message: str) -> Dict[str, Any]:
        """
        Answer a question about a document the caller owns

        Args:
            document: Owner-checked document record
            message: User question

        Returns:
            {"response", "document_title", "timestamp"}

        Raises:
            ValidationError: Blank message, or document still processing
            ExtractionError: Document failed indexing or has no retrievable text
            UpstreamError: Embedding, vector database or completion failure
        """
        message = require_text(message, "Message is required")

        if document.status == "error":
            raise ExtractionError(document.error_message or ExtractionError.default_message)
        if document.status == "processing":
            raise ValidationError("Document is still being processed")

        chunks = await self.indexer.search(str(document.id), message, k=settings.RETRIEVAL_TOP_K)
        if not chunks:
            raise ExtractionError("No text content found in PDF")

        messages = [
            {"role": "system", "content": self.prompt_builder.build_chat_system_prompt(document.title, chunks)},
            {"role": "user", "content": message},
        ]

        logger.info(f"Chat on document {document.id}: {len(chunks)} context windows")
        response = await complete_chat(messages)

        return {
            "response": response,
            "document_title": document.title,
            "timestamp": datetime.now(timezone.utc),
        }
