"""
Vector Indexer
Chunk page text into windows, embed them, and store them in the document's namespace
"""

from typing import Dict, List, Tuple
import asyncio
import logging
import uuid

from glance.chunking.window_chunker import WindowChunker
from glance.config import settings
from glance.core.exceptions import ExtractionError
from glance.embeddings.openai_embedder import OpenAIEmbedder, BATCH_SIZE
from glance.vector_store.chroma_store import ChromaVectorStore, NAMESPACE_KEY

logger = logging.getLogger(__name__)


class VectorIndexer:
    """Index documents into, search, and purge per-document vector namespaces"""

    def __init__(
        self,
        embedder: OpenAIEmbedder,
        vector_store: ChromaVectorStore,
        chunker: WindowChunker = None,
    ):
        self.embedder = embedder
        self.vector_store = vector_store
        self.chunker = chunker or WindowChunker()

    async def index_document(self, document_id: str, pages: List[Tuple[int, str]]) -> int:
        """
        Index a document's pages into its namespace

        Windows get random ids, so indexing a namespace that already holds
        windows duplicates them; callers that re-index purge first.

        Args:
            document_id: Document id, used as the namespace
            pages: (page_number, text) pairs from the PDF extractor

        Returns:
            int: Number of windows written

        Raises:
            ExtractionError: No text to index
            UpstreamError: Embedding API or vector database failure
        """
        namespace = str(document_id)

        # Chunking and the vector database client are synchronous
        windows = await asyncio.to_thread(self.chunker.chunk_pages, pages)
        if not windows:
            raise ExtractionError("No text content found in PDF")

        existing = await asyncio.to_thread(self.vector_store.count, namespace)
        if existing:
            logger.warning(
                f"Namespace {namespace} already holds {existing} windows; "
                f"indexing again will duplicate them"
            )

        texts = [w["content"] for w in windows]
        embeddings = await self.embedder.embed_batch(texts)

        ids = [str(uuid.uuid4()) for _ in windows]
        metadatas: List[Dict] = [
            {
                NAMESPACE_KEY: namespace,
                "document_id": namespace,
                "page": w["page"],
                "chunk_index": w["chunk_index"],
            }
            for w in windows
        ]

        for i in range(0, len(ids), BATCH_SIZE):
            await asyncio.to_thread(
                self.vector_store.upsert,
                ids=ids[i:i + BATCH_SIZE],
                embeddings=embeddings[i:i + BATCH_SIZE],
                documents=texts[i:i + BATCH_SIZE],
                metadatas=metadatas[i:i + BATCH_SIZE],
            )

        logger.info(f"Indexed document {namespace}: {len(ids)} windows from {len(pages)} pages")
        return len(ids)

    async def search(self, document_id: str, question: str, k: int = settings.RETRIEVAL_TOP_K) -> List[str]:
        """
        Top-k window texts for a question, most similar first

        Raises:
            UpstreamError: Embedding API or vector database failure
        """
        embedding = await self.embedder.embed(question)
        hits = await asyncio.to_thread(self.vector_store.query, str(document_id), embedding, k)

        logger.debug(f"Retrieved {len(hits)} windows from namespace {document_id}")
        return [hit["text"] for hit in hits if hit["text"]]

    def delete_namespace(self, document_id: str):
        """Purge every window of a document"""
        self.vector_store.delete_namespace(str(document_id))
