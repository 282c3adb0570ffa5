"""
Unit tests for the PDF text extractor

Tests:
- Whitespace normalization
- Sentence splitting and sentence-aligned chunking
- Page extraction from real PDF bytes
- Download failures
"""

import pytest
from unittest.mock import patch

import httpx
import pypdfium2 as pdfium

from glance.core.exceptions import ExtractionError
from glance.parsers.pdf_parser import (
    download_pdf,
    extract_pages,
    extract_text,
    extract_text_from_pdf,
    normalize_whitespace,
    split_into_chunks,
    split_into_sentences,
)

RealAsyncClient = httpx.AsyncClient


def client_with(handler):
    """AsyncClient factory routed through a MockTransport"""

    def factory(*args, **kwargs):
        return RealAsyncClient(*args, transport=httpx.MockTransport(handler), **kwargs)

    return factory


@pytest.mark.unit
class TestNormalizeWhitespace:

    def test_collapses_runs_and_newlines(self):
        assert normalize_whitespace("  one\n\ttwo \r\n  three  ") == "one two three"

    def test_blank_becomes_empty(self):
        assert normalize_whitespace(" \n\t ") == ""


@pytest.mark.unit
class TestSplitIntoSentences:

    def test_keeps_terminators(self):
        text = "Hello world. How are you? Fine!"
        assert split_into_sentences(text) == ["Hello world.", "How are you?", "Fine!"]

    def test_trailing_fragment_is_a_sentence(self):
        assert split_into_sentences("First one. no terminator here") == [
            "First one.",
            "no terminator here",
        ]

    def test_terminator_runs_stay_together(self):
        assert split_into_sentences("Wait... what?!") == ["Wait...", "what?!"]

    def test_empty_text(self):
        assert split_into_sentences("") == []


@pytest.mark.unit
class TestSplitIntoChunks:

    def test_chunks_respect_budget(self):
        text = " ".join(f"Sentence number {i} is here." for i in range(50))
        chunks = split_into_chunks(text, max_chunk_size=100)

        assert len(chunks) > 1
        assert all(len(chunk) <= 100 for chunk in chunks)

    def test_chunks_rejoin_to_sentence_sequence(self):
        text = "Alpha beta. Gamma delta! Epsilon zeta? Eta theta."
        chunks = split_into_chunks(text, max_chunk_size=25)

        assert " ".join(chunks) == " ".join(split_into_sentences(text))

    def test_oversize_sentence_is_its_own_chunk(self):
        long_sentence = "x" * 150 + "."
        chunks = split_into_chunks(f"Short. {long_sentence} Tail.", max_chunk_size=50)

        assert chunks == ["Short.", long_sentence, "Tail."]

    def test_no_empty_chunks(self):
        assert split_into_chunks("   ") == []

    def test_default_budget(self):
        text = "A sentence. " * 400
        chunks = split_into_chunks(text)
        assert all(len(chunk) <= 2000 for chunk in chunks)

    def test_default_budget_comes_from_settings(self):
        with patch("glance.parsers.pdf_parser.settings") as mock_settings:
            mock_settings.SENTENCE_CHUNK_SIZE = 30
            chunks = split_into_chunks("First sentence here. Second sentence here. Third one.")

        assert chunks == ["First sentence here.", "Second sentence here.", "Third one."]


@pytest.mark.unit
class TestExtractPages:

    def test_extracts_each_page(self, sample_pdf):
        pages = extract_pages(sample_pdf)

        assert [number for number, _ in pages] == [1, 2]
        assert pages[0][1].startswith("Transformers rely on")
        assert "self-attention" in pages[0][1]
        assert "training" in pages[1][1]

    def test_text_is_normalized(self, sample_pdf):
        for _, text in extract_pages(sample_pdf):
            assert "\n" not in text
            assert text == text.strip()

    def test_pages_without_text_are_skipped(self, pdf_builder):
        pages = extract_pages(pdf_builder(["", "Only the second page has text."]))
        assert [number for number, _ in pages] == [2]

    def test_unreadable_bytes(self):
        with pytest.raises(ExtractionError):
            extract_pages(b"this is not a pdf")

    def test_unreadable_page(self, sample_pdf):
        with patch.object(pdfium.PdfPage, "get_textpage", side_effect=pdfium.PdfiumError("bad page")):
            with pytest.raises(ExtractionError) as exc_info:
                extract_pages(sample_pdf)

        assert exc_info.value.message == "Failed to extract text from page 1"

    def test_extract_text_without_text_layer(self, empty_pdf):
        with pytest.raises(ExtractionError) as exc_info:
            extract_text(empty_pdf)
        assert exc_info.value.message == "No text content found in PDF"

    def test_extract_text_joins_pages(self, sample_pdf):
        text = extract_text(sample_pdf)
        assert "order!" in text
        assert text.endswith("large corpora.")


@pytest.mark.unit
@pytest.mark.asyncio
class TestDownload:

    async def test_download_returns_bytes(self, sample_pdf):
        def handler(request):
            return httpx.Response(200, content=sample_pdf)

        with patch("glance.parsers.pdf_parser.httpx.AsyncClient", new=client_with(handler)):
            data = await download_pdf("https://bucket.example.com/paper.pdf")

        assert data == sample_pdf

    async def test_http_error_status(self):
        def handler(request):
            return httpx.Response(404)

        with patch("glance.parsers.pdf_parser.httpx.AsyncClient", new=client_with(handler)):
            with pytest.raises(ExtractionError) as exc_info:
                await download_pdf("https://bucket.example.com/missing.pdf")

        assert exc_info.value.message == "Failed to download PDF"

    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with patch("glance.parsers.pdf_parser.httpx.AsyncClient", new=client_with(handler)):
            with pytest.raises(ExtractionError):
                await download_pdf("https://bucket.example.com/paper.pdf")

    async def test_extract_text_from_pdf(self, sample_pdf):
        def handler(request):
            return httpx.Response(200, content=sample_pdf)

        with patch("glance.parsers.pdf_parser.httpx.AsyncClient", new=client_with(handler)):
            text = await extract_text_from_pdf("https://bucket.example.com/paper.pdf")

        assert text.startswith("Transformers rely on")
