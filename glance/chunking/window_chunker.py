"""
Window Chunker - Fixed-size overlapping windows using Chonkie

Each page is cut independently so every window maps to exactly one page.
With the default "character" tokenizer, sizes are in characters.
"""

from typing import List, Dict, Any, Tuple
import logging

from glance.config import settings

logger = logging.getLogger(__name__)


class WindowChunker:
    """Split page text into overlapping fixed-size windows with chonkie's TokenChunker"""

    def __init__(
        self,
        chunk_size: int = settings.CHUNK_SIZE,
        chunk_overlap: int = settings.CHUNK_OVERLAP,
        tokenizer: str = settings.CHUNK_TOKENIZER,
    ):
        """
        Args:
            chunk_size: Window size in tokenizer units
            chunk_overlap: Units shared by consecutive windows (must be < chunk_size)
            tokenizer: Chonkie tokenizer name
        """
        if chunk_overlap >= chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.tokenizer = tokenizer

        # Lazy initialization (chonkie import is slow)
        self._chunker = None

    def _get_chunker(self):
        if self._chunker is None:
            from chonkie import TokenChunker

            self._chunker = TokenChunker(
                tokenizer=self.tokenizer,
                chunk_size=self.chunk_size,
                chunk_overlap=self.chunk_overlap,
            )
            logger.info(
                f"TokenChunker initialized: size={self.chunk_size}, "
                f"overlap={self.chunk_overlap}, tokenizer={self.tokenizer}"
            )
        return self._chunker

    def chunk_pages(self, pages: List[Tuple[int, str]]) -> List[Dict[str, Any]]:
        """
        Chunk every page into windows

        Args:
            pages: (page_number, text) pairs

        Returns:
            List of {"content", "chunk_index", "page", "metadata"} dicts,
            chunk_index running across the whole document
        """
        chunker = self._get_chunker()
        result = []

        for page_number, text in pages:
            if not text or not text.strip():
                continue

            for chunk in chunker.chunk(text):
                content = chunk.text.strip()
                if not content:
                    continue

                result.append({
                    "content": content,
                    "chunk_index": len(result),
                    "page": page_number,
                    "metadata": {
                        "start_char": getattr(chunk, 'start_index', 0),
                        "end_char": getattr(chunk, 'end_index', len(chunk.text)),
                    }
                })

        logger.info(f"Chunking complete: {len(result)} windows from {len(pages)} pages")
        return result
