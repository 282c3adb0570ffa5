"""
Pydantic Schemas for the academic paper search endpoint
"""

from pydantic import Field
from typing import List, Literal, Optional

from glance.schemas.document import CamelModel


class SearchRequest(CamelModel):
    query: Optional[str] = Field(None, description="Search terms")
    filter: Optional[str] = Field(None, description="'pdf_only' keeps papers with a PDF link")


class ResearchPaper(CamelModel):
    """One scraped search hit; every field except title/source is best-effort"""
    title: str
    authors: List[str] = Field(default_factory=list)
    year: Optional[str] = None
    abstract: Optional[str] = None
    pdf_url: Optional[str] = None
    source_url: str = ""
    source: Literal["Google Scholar", "ResearchGate"]
    citations: Optional[int] = None
    doi: Optional[str] = None
    journal: Optional[str] = None


class SearchSources(CamelModel):
    google_scholar: int = 0
    research_gate: int = 0


class SearchMetadata(CamelModel):
    total: int
    with_pdf: int
    sources: SearchSources


class SearchResponse(CamelModel):
    results: List[ResearchPaper]
    metadata: SearchMetadata
