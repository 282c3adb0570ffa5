"""
Chroma Vector Store
Hosted Chroma server holding document windows, partitioned by namespace

All windows share one collection (VECTOR_INDEX_NAME). The "namespace"
metadata key holds the document id and scopes every query and deletion.
"""

from typing import Any, Dict, List, Optional
import logging
import threading

import chromadb
from chromadb.config import Settings as ChromaSettings

from glance.config import settings
from glance.utils.error_handlers import ErrorHandler

logger = logging.getLogger(__name__)

NAMESPACE_KEY = "namespace"


class ChromaVectorStore:
    """Thin wrapper around a Chroma collection with per-document namespaces"""

    def __init__(self, client: Optional[Any] = None, collection_name: str = None):
        """
        Args:
            client: Preconfigured chromadb client (defaults to an HttpClient from settings)
            collection_name: Collection holding every document's windows
        """
        self._client = client
        self.collection_name = collection_name or settings.VECTOR_INDEX_NAME
        self._collection = None
        self._lock = threading.Lock()

    def _build_client(self):
        headers = {}
        if settings.VECTOR_DB_API_KEY:
            headers["x-chroma-token"] = settings.VECTOR_DB_API_KEY

        logger.info(
            f"Connecting to Chroma at {settings.VECTOR_DB_HOST}:{settings.VECTOR_DB_PORT} "
            f"(collection={self.collection_name})"
        )
        return chromadb.HttpClient(
            host=settings.VECTOR_DB_HOST,
            port=settings.VECTOR_DB_PORT,
            ssl=settings.VECTOR_DB_SSL,
            headers=headers,
            settings=ChromaSettings(anonymized_telemetry=False),
        )

    def _get_collection(self):
        if self._collection is None:
            with self._lock:
                if self._collection is None:
                    try:
                        if self._client is None:
                            self._client = self._build_client()
                        self._collection = self._client.get_or_create_collection(
                            name=self.collection_name,
                            metadata={"hnsw:space": "cosine"},
                        )
                    except Exception as e:
                        raise ErrorHandler.handle_vector_db_error(e) from e
        return self._collection

    def upsert(
        self,
        ids: List[str],
        embeddings: List[List[float]],
        documents: List[str],
        metadatas: List[Dict[str, Any]],
    ):
        """
        Write windows to the collection

        Raises:
            UpstreamError: Vector database failure
        """
        if not (len(ids) == len(embeddings) == len(documents) == len(metadatas)):
            raise ValueError("upsert arrays length mismatch")
        if not ids:
            return

        collection = self._get_collection()
        try:
            collection.upsert(
                ids=ids,
                embeddings=embeddings,
                documents=documents,
                metadatas=metadatas,
            )
        except Exception as e:
            raise ErrorHandler.handle_vector_db_error(e) from e

        logger.debug(f"Upserted {len(ids)} vectors into {self.collection_name}")

    def query(self, namespace: str, embedding: List[float], k: int) -> List[Dict[str, Any]]:
        """
        Top-k similarity search inside one namespace

        Returns:
            List of {"id", "text", "metadata", "score"} dicts, most similar first
        """
        collection = self._get_collection()
        try:
            result = collection.query(
                query_embeddings=[embedding],
                n_results=k,
                where={NAMESPACE_KEY: namespace},
                include=["documents", "metadatas", "distances"],
            )
        except Exception as e:
            raise ErrorHandler.handle_vector_db_error(e) from e

        ids = (result.get("ids") or [[]])[0]
        documents = (result.get("documents") or [[]])[0]
        metadatas = (result.get("metadatas") or [[]])[0]
        distances = (result.get("distances") or [[]])[0]

        hits = []
        for i, chunk_id in enumerate(ids):
            distance = distances[i] if i < len(distances) else None
            hits.append({
                "id": chunk_id,
                "text": documents[i] if i < len(documents) else "",
                "metadata": metadatas[i] if i < len(metadatas) else {},
                # cosine distance -> similarity
                "score": 1.0 - distance if distance is not None else None,
            })

        # Chroma returns nearest first; keep that order explicit
        hits.sort(key=lambda h: h["score"] if h["score"] is not None else float("-inf"), reverse=True)
        return hits

    def count(self, namespace: str) -> int:
        """Number of windows stored in a namespace"""
        collection = self._get_collection()
        try:
            result = collection.get(where={NAMESPACE_KEY: namespace}, include=[])
        except Exception as e:
            raise ErrorHandler.handle_vector_db_error(e) from e
        return len(result.get("ids") or [])

    def delete_namespace(self, namespace: str):
        """Remove every window of a namespace"""
        collection = self._get_collection()
        try:
            collection.delete(where={NAMESPACE_KEY: namespace})
        except Exception as e:
            raise ErrorHandler.handle_vector_db_error(e) from e

        logger.info(f"Purged vector namespace {namespace}")
