"""
OpenAI Embedder
Generate embeddings using OpenAI text-embedding-3 models
"""

from typing import List
from openai import AsyncOpenAI, APIError
from glance.config import settings
from glance.utils.error_handlers import ErrorHandler
import logging

logger = logging.getLogger(__name__)

# Inputs per embeddings request
BATCH_SIZE = 100


class OpenAIEmbedder:
    """Generate embeddings using the OpenAI API"""

    def __init__(self, client: AsyncOpenAI = None):
        self.client = client or AsyncOpenAI(
            api_key=settings.OPENAI_API_KEY,
            timeout=settings.LLM_TIMEOUT,
            max_retries=0,
        )
        self.model = settings.EMBEDDING_MODEL
        self.dimensions = settings.EMBEDDING_DIMENSIONS

    async def embed_batch(self, texts: List[str]) -> List[List[float]]:
        """
        Generate embeddings for batch of texts

        Args:
            texts: List of text strings

        Returns:
            List of embedding vectors, in input order

        Raises:
            UpstreamError: API failure (QuotaExceededError for quota / rate limits)
        """
        all_embeddings = []

        for i in range(0, len(texts), BATCH_SIZE):
            batch = texts[i:i + BATCH_SIZE]

            try:
                response = await self.client.embeddings.create(
                    model=self.model,
                    input=batch,
                    dimensions=self.dimensions
                )
            except APIError as e:
                raise ErrorHandler.handle_llm_error(e, provider="openai-embeddings")

            embeddings = [item.embedding for item in response.data]
            all_embeddings.extend(embeddings)

        return all_embeddings

    async def embed(self, text: str) -> List[float]:
        """
        Generate embedding for single text

        Args:
            text: Text to embed

        Returns:
            Embedding vector
        """
        embeddings = await self.embed_batch([text])
        return embeddings[0]
