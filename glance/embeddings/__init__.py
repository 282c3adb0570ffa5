"""
Embedding generation
"""

from glance.embeddings.openai_embedder import OpenAIEmbedder

__all__ = ["OpenAIEmbedder"]
