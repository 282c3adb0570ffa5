"""
Academic Search Service
Scrapes Google Scholar and ResearchGate result pages concurrently

Both sources are best-effort: a source that fails (network error, block
page, markup change) contributes zero results instead of failing the search.
"""

import asyncio
import re
from typing import List, Optional
from urllib.parse import quote_plus
import logging

import httpx
from bs4 import BeautifulSoup

from glance.config import settings
from glance.schemas.search import ResearchPaper, SearchMetadata, SearchResponse, SearchSources

logger = logging.getLogger(__name__)

GOOGLE_SCHOLAR_URL = "https://scholar.google.com/scholar?q={query}&hl=en"
RESEARCHGATE_URL = "https://www.researchgate.net/search/publication?q={query}"
RESEARCHGATE_BASE = "https://www.researchgate.net"

# Headers to mimic browser behavior
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
    "Cache-Control": "max-age=0",
}

PDF_ONLY = "pdf_only"

_YEAR = re.compile(r"\d{4}")
_CITED_BY = re.compile(r"Cited by (\d+)")


def _text(element) -> str:
    return element.get_text().strip() if element is not None else ""


def parse_google_scholar(html: str) -> List[ResearchPaper]:
    """
    Parse a Google Scholar result page

    Each `.gs_ri` block yields one paper: title/link from `.gs_rt a`,
    authors and year from `.gs_a`, citations from `.gs_fl`, the first
    PDF link, and the `.gs_rs` snippet as abstract.
    """
    soup = BeautifulSoup(html, "html.parser")
    papers = []

    for block in soup.select(".gs_ri"):
        title_link = block.select_one(".gs_rt a")
        title = _text(title_link)
        if not title:
            # Citation-only entries have no link
            title = _text(block.select_one(".gs_rt"))
        if not title:
            continue

        # "A Author, B Author - Journal, 2020 - publisher"
        author_info = _text(block.select_one(".gs_a"))
        authors = [a.strip() for a in author_info.split("-")[0].split(",") if a.strip()]
        year_match = _YEAR.search(author_info)

        citations_match = _CITED_BY.search(_text(block.select_one(".gs_fl")))

        pdf_url = None
        for link in block.find_all("a"):
            href = link.get("href") or ""
            if href.endswith(".pdf") or "[PDF]" in link.get_text():
                pdf_url = href or None
                break

        papers.append(ResearchPaper(
            title=title,
            authors=authors,
            year=year_match.group(0) if year_match else None,
            abstract=_text(block.select_one(".gs_rs")) or None,
            pdf_url=pdf_url,
            source_url=(title_link.get("href") if title_link is not None else None) or "",
            source="Google Scholar",
            citations=int(citations_match.group(1)) if citations_match else None,
        ))

    return papers


def parse_research_gate(html: str) -> List[ResearchPaper]:
    """Parse a ResearchGate publication search page (`.research-item-main` blocks)"""
    soup = BeautifulSoup(html, "html.parser")
    papers = []

    for block in soup.select(".research-item-main"):
        title_element = block.select_one(".research-item-title")
        title = _text(title_element)
        if not title:
            continue

        link = title_element.find("a")
        href = link.get("href") if link is not None else ""

        doi_link = block.select_one('a[href*="doi.org"]')
        doi = None
        if doi_link is not None and doi_link.get("href"):
            doi = doi_link["href"].replace("https://doi.org/", "")

        papers.append(ResearchPaper(
            title=title,
            authors=[_text(a) for a in block.select(".research-item-author") if _text(a)],
            abstract=_text(block.select_one(".research-item-abstract")) or None,
            source_url=RESEARCHGATE_BASE + (href or ""),
            source="ResearchGate",
            doi=doi,
            journal=_text(block.select_one(".research-item-meta")) or None,
        ))

    return papers


def sort_by_citations(papers: List[ResearchPaper]) -> List[ResearchPaper]:
    """Most cited first; papers without a citation count keep their order at the end"""
    return sorted(papers, key=lambda p: (p.citations is None, -(p.citations or 0)))


class AcademicSearchService:
    """Concurrent scrape of both sources, merged into one ranked list"""

    def __init__(self, timeout: float = settings.HTTP_TIMEOUT_SECONDS, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport

    async def _fetch(self, client: httpx.AsyncClient, url: str) -> str:
        response = await client.get(url)
        response.raise_for_status()
        return response.text

    async def search_google_scholar(self, client: httpx.AsyncClient, query: str) -> List[ResearchPaper]:
        html = await self._fetch(client, GOOGLE_SCHOLAR_URL.format(query=quote_plus(query)))
        return parse_google_scholar(html)

    async def search_research_gate(self, client: httpx.AsyncClient, query: str) -> List[ResearchPaper]:
        html = await self._fetch(client, RESEARCHGATE_URL.format(query=quote_plus(query)))
        return parse_research_gate(html)

    @staticmethod
    def _settle(name: str, result) -> List[ResearchPaper]:
        if isinstance(result, Exception):
            logger.warning(f"{name} search failed: {type(result).__name__}: {result}")
            return []
        return result

    async def search(self, query: str, result_filter: Optional[str] = None) -> SearchResponse:
        """
        Search both sources

        Args:
            query: Search terms (already validated as non-blank)
            result_filter: "pdf_only" keeps only papers with a PDF link

        Returns:
            SearchResponse with results sorted by citations and per-source counts
        """
        async with httpx.AsyncClient(
            headers=BROWSER_HEADERS,
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            scholar_result, rg_result = await asyncio.gather(
                self.search_google_scholar(client, query),
                self.search_research_gate(client, query),
                return_exceptions=True,
            )

        scholar = self._settle("Google Scholar", scholar_result)
        research_gate = self._settle("ResearchGate", rg_result)

        results = scholar + research_gate
        if result_filter == PDF_ONLY:
            results = [paper for paper in results if paper.pdf_url]

        results = sort_by_citations(results)

        logger.info(
            f"Academic search: {len(results)} results "
            f"(scholar={len(scholar)}, researchgate={len(research_gate)}, filter={result_filter})"
        )

        return SearchResponse(
            results=results,
            metadata=SearchMetadata(
                total=len(results),
                with_pdf=sum(1 for paper in results if paper.pdf_url),
                sources=SearchSources(
                    google_scholar=len(scholar),
                    research_gate=len(research_gate),
                ),
            ),
        )
