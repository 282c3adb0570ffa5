"""
Vector database access (hosted Chroma)
"""

from glance.vector_store.chroma_store import ChromaVectorStore, NAMESPACE_KEY

__all__ = ["ChromaVectorStore", "NAMESPACE_KEY"]
