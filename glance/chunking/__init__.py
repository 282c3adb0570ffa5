"""
Text Chunking System
Overlapping window chunking using Chonkie
"""

from glance.chunking.window_chunker import WindowChunker

__all__ = ["WindowChunker"]
