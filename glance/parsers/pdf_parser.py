"""
PDF Text Extractor
Downloads PDFs by URL and extracts text with pypdfium2
"""

from typing import List, Optional, Tuple
import logging
import re

import httpx
import pypdfium2 as pdfium

from glance.config import settings
from glance.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

# A sentence runs up to its terminator run; a trailing fragment without one still counts
_SENTENCE = re.compile(r"[^.!?]*[.!?]+|[^.!?]+$")


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run (newlines included) to one space and trim"""
    return _WHITESPACE.sub(" ", text).strip()


def extract_pages(data: bytes) -> List[Tuple[int, str]]:
    """
    Extract normalized text per page

    Args:
        data: Raw PDF bytes

    Returns:
        List of (page_number, text) with 1-based page numbers; pages without text are skipped

    Raises:
        ExtractionError: If the bytes or one of the pages cannot be read
    """
    try:
        pdf = pdfium.PdfDocument(data)
    except pdfium.PdfiumError as e:
        logger.warning(f"Unreadable PDF: {e}")
        raise ExtractionError("Failed to extract text from PDF")

    pages = []
    try:
        for i, page in enumerate(pdf):
            try:
                text = normalize_whitespace(page.get_textpage().get_text_range() or "")
            except pdfium.PdfiumError as e:
                logger.warning(f"Unreadable PDF page {i + 1}: {e}")
                raise ExtractionError(f"Failed to extract text from page {i + 1}")
            if text:
                pages.append((i + 1, text))
    finally:
        pdf.close()

    logger.debug(f"Extracted text from {len(pages)} pages")
    return pages


def extract_text(data: bytes) -> str:
    """
    Extract the whole document as one whitespace-normalized string

    Raises:
        ExtractionError: If the PDF is unreadable or has no text layer
    """
    text = " ".join(text for _, text in extract_pages(data))
    if not text:
        raise ExtractionError("No text content found in PDF")
    return text


async def download_pdf(url: str) -> bytes:
    """
    Download a PDF over HTTP

    Raises:
        ExtractionError: On any transport error or non-2xx response
    """
    try:
        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"Failed to download PDF from {url}: {e}")
        raise ExtractionError("Failed to download PDF")

    return response.content


async def extract_text_from_pdf(url: str) -> str:
    """
    Download a PDF and return its full text

    Args:
        url: Public URL of the PDF

    Returns:
        Whitespace-normalized text of every page, joined

    Raises:
        ExtractionError: Download failure, unreadable PDF, or no extractable text
    """
    data = await download_pdf(url)
    return extract_text(data)


def split_into_sentences(text: str) -> List[str]:
    """Split on . ! ? terminators, keeping each terminator with its sentence"""
    sentences = []
    for match in _SENTENCE.finditer(text):
        sentence = match.group(0).strip()
        if sentence:
            sentences.append(sentence)
    return sentences


def split_into_chunks(text: str, max_chunk_size: Optional[int] = None) -> List[str]:
    """
    Group sentences into chunks of at most max_chunk_size characters

    A sentence longer than max_chunk_size becomes its own (oversize) chunk.
    Joining the chunks with single spaces gives back the sentence sequence.

    Args:
        text: Source text
        max_chunk_size: Character budget per chunk (default SENTENCE_CHUNK_SIZE)

    Returns:
        Non-empty, stripped chunks in source order
    """
    max_chunk_size = max_chunk_size or settings.SENTENCE_CHUNK_SIZE

    chunks = []
    current: List[str] = []
    current_len = 0

    for sentence in split_into_sentences(text):
        # +1 for the joining space
        added = len(sentence) + (1 if current else 0)
        if current and current_len + added > max_chunk_size:
            chunks.append(" ".join(current))
            current = []
            current_len = 0
            added = len(sentence)
        current.append(sentence)
        current_len += added

    if current:
        chunks.append(" ".join(current))

    return chunks
