"""
Document parsers
PDF download, text extraction and sentence chunking
"""

from glance.parsers.pdf_parser import (
    download_pdf,
    extract_pages,
    extract_text,
    extract_text_from_pdf,
    normalize_whitespace,
    split_into_chunks,
    split_into_sentences,
)

__all__ = [
    "download_pdf",
    "extract_pages",
    "extract_text",
    "extract_text_from_pdf",
    "normalize_whitespace",
    "split_into_chunks",
    "split_into_sentences",
]
